from time import sleep, perf_counter

import lazy
from containers import defaultmap
from lazy import LazyCollection
from utils import process_lazy_operations


def expensive_check(x):
    # Simulate a costly predicate so laziness is visible
    print(f"  checking {x} ...")
    sleep(0.1)
    return x % 2 == 0


print("\n--- Demo: laziness (no work until pulled) ---")
evens = lazy.filter(expensive_check, range(1, 10_000))
print("Built filter over 9999 items. Nothing checked yet.")
t0 = perf_counter()
first_three = list(lazy.take_while(lambda v: v <= 6, evens))
t1 = perf_counter()
print(f"Evens up to 6: {first_three} (time: {t1 - t0:.2f}s)\n")

print("--- Demo: partition runs the predicate once per item ---")
even, odd = lazy.partition(expensive_check, [1, 2, 3, 4, 5])
print(f"Even: {list(even)}")
print(f"Odd:  {list(odd)}  (no new checks above)\n")

print("--- Demo: keys survive key-preserving steps ---")
prices = {"apple": 3, "pear": 7, "plum": 12}
doubled = lazy.map(lambda p: p * 2, lazy.filter(lambda p: p > 5, prices))
print(f"Doubled prices over 5: {dict(doubled.items())}\n")

print("--- Demo: flatten ---")
nested = [1, [2, 3], [4, [5, 6]]]
print(f"depth=None: {list(lazy.flatten(nested))}")
print(f"depth=1:    {list(lazy.flatten(nested, 1))}")
print(f"depth=0:    {list(lazy.flatten(nested, 0))}\n")

print("--- Demo: zip stops at the shortest source ---")
print(list(lazy.zip([1, 2, 3], "ab", range(100))))
print(list(lazy.zip_with(lambda x, y: x + y, [1, 2, 3], [10, 20, 30])))
print()

print("--- Demo: chained collection over an unbounded source ---")


def naturals():
    n = 0
    while True:
        yield n
        n += 1


squares = (
    LazyCollection(naturals())
    .map(lambda x: x * x)
    .filter_not(lambda x: x % 3 == 0)
    .take(4, step=2)
)
print(f"Every other square not divisible by 3: {squares.to_list()}\n")

print("--- Demo: declarative pipeline ---")
run = process_lazy_operations(
    [[1, 2], [3, [4, 5]], 6, [7, 8, 9]],
    [
        {"type": "flatten"},
        {"type": "drop", "count": 1},
        {"type": "batch", "size": 3},
    ],
)
print(f"Batches: {run.result}")
print(f"Steps: {run.operations_applied}, time: {run.performance.processing_time_ms:.2f}ms\n")

print("--- Demo: defaultmap ---")
groups = defaultmap(factory=list)
for word in ["ant", "bee", "asp", "bat", "cow"]:
    groups[word[0]].append(word)
print(dict(groups))
