"""Benchmark term loading and matching for several dictionary sizes.

Run from the repository root with `python -m benchmarks.run_benchmarks`.
"""

import concurrent.futures
import gc
import json
import random
import time
import tracemalloc
from pathlib import Path

import matplotlib.pyplot as plt
import psutil

from src.matcher.fast_matcher import FastMatcher

RESULTS_DIR = Path(__file__).parent / "results"
TERM_COUNTS = [1_000, 10_000, 50_000, 100_000]
NUMBER_OF_THREADS_IN_EACH_BENCHMARK = [1, 4, 16]
VOCABULARY_SIZE = 5_000
TEXTS_PER_BENCHMARK = 200
WORDS_PER_TEXT = 300
SEED = 42


def build_vocabulary(size: int, rng: random.Random) -> list[str]:
    """Build a vocabulary of random lowercase words.

    Args:
        size (int): The number of words.
        rng (random.Random): The random generator.

    Returns:
        list[str]: The vocabulary.

    """
    letters = "abcdefghijklmnopqrstuvwxyz"
    return [
        "".join(rng.choice(letters) for _ in range(rng.randint(3, 9)))
        for _ in range(size)
    ]


def generate_terms(
    vocabulary: list[str],
    count: int,
    rng: random.Random,
) -> list[str]:
    """Generate terms of one to four words drawn from the vocabulary."""
    return [
        " ".join(rng.choices(vocabulary, k=rng.randint(1, 4)))
        for _ in range(count)
    ]


def generate_texts(vocabulary: list[str], rng: random.Random) -> list[str]:
    """Generate the texts every benchmark run matches against."""
    separators = [" ", " ", " ", ", ", ". ", "\n"]
    texts = []
    for _ in range(TEXTS_PER_BENCHMARK):
        words = rng.choices(vocabulary, k=WORDS_PER_TEXT)
        texts.append(
            "".join(word + rng.choice(separators) for word in words),
        )
    return texts


def benchmark_load(terms: list[str]) -> tuple[FastMatcher, float, float]:
    """Load terms into a new matcher and measure time and memory.

    Args:
        terms (list[str]): The raw terms.

    Returns:
        tuple[FastMatcher, float, float]: The matcher, the load time in
        seconds and the peak traced memory in MB.

    """
    gc.collect()
    tracemalloc.start()
    start = time.perf_counter()
    matcher = FastMatcher.from_terms(terms)
    elapsed = time.perf_counter() - start
    _current, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return matcher, elapsed, peak / (1024 * 1024)


def benchmark_match(
    matcher: FastMatcher,
    texts: list[str],
    threads: int,
) -> dict[str, float]:
    """Match every text using a pool of threads sharing one matcher.

    Args:
        matcher (FastMatcher): A loaded matcher.
        texts (list[str]): The texts to match.
        threads (int): The number of worker threads.

    Returns:
        dict[str, float]: Average call time in ms, total wall time in
        seconds and the total number of matches.

    """
    call_times: list[float] = []
    match_count = 0

    def single_call(text: str) -> tuple[float, int]:
        call_start = time.perf_counter()
        found = matcher.match_text(text)
        return (time.perf_counter() - call_start) * 1000, len(found)

    start = time.perf_counter()
    with concurrent.futures.ThreadPoolExecutor(max_workers=threads) as pool:
        for elapsed_ms, found in pool.map(single_call, texts):
            call_times.append(elapsed_ms)
            match_count += found
    wall_time = time.perf_counter() - start

    return {
        "average_execution_time": sum(call_times) / len(call_times),
        "wall_time": wall_time,
        "match_count": match_count,
    }


def plot_results(results: dict[int, dict], output_path: Path) -> None:
    """Plot the average match time per dictionary size and thread count."""
    plt.figure(figsize=(10, 6))
    for threads in NUMBER_OF_THREADS_IN_EACH_BENCHMARK:
        sizes = sorted(results)
        times = [
            results[size]["match"][str(threads)]["average_execution_time"]
            for size in sizes
        ]
        plt.plot(sizes, times, marker="o", label=f"{threads} threads")

    plt.xscale("log")
    plt.xlabel("Number of terms")
    plt.ylabel("Average match time per text (ms)")
    plt.title("FastMatcher match time")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()


def main() -> None:
    """Run every benchmark and store the results."""
    rng = random.Random(SEED)
    vocabulary = build_vocabulary(VOCABULARY_SIZE, rng)
    texts = generate_texts(vocabulary, rng)
    process = psutil.Process()

    results: dict[int, dict] = {}
    for term_count in TERM_COUNTS:
        terms = generate_terms(vocabulary, term_count, rng)
        rss_before = process.memory_info().rss
        matcher, load_time, peak_mb = benchmark_load(terms)
        rss_after = process.memory_info().rss

        print(
            f"[BENCHMARK] {term_count} terms loaded in {load_time:.3f}s "
            f"(peak {peak_mb:.1f} MB)",
        )

        results[term_count] = {
            "load_time": load_time,
            "load_peak_memory_mb": peak_mb,
            "rss_delta_mb": (rss_after - rss_before) / (1024 * 1024),
            "distinct_terms": matcher.term_count,
            "match": {},
        }
        for threads in NUMBER_OF_THREADS_IN_EACH_BENCHMARK:
            result = benchmark_match(matcher, texts, threads)
            results[term_count]["match"][str(threads)] = result
            print(
                f"[BENCHMARK] {term_count} terms, {threads} threads: "
                f"{result['average_execution_time']:.2f} ms per text",
            )

        del matcher
        gc.collect()

    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    with open(RESULTS_DIR / "results.json", "w", encoding="utf-8") as file:
        json.dump(results, file, indent=4)
    plot_results(results, RESULTS_DIR / "match_time.png")


if __name__ == "__main__":
    main()
