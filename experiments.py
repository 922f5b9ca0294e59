"""
Static Huffman codec experiments

Runs the compressor over synthetic datasets, with repeated runs, and reports
how close the code gets to the source entropy and how time scales with size.

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 3 --exp1_size_kb 256 --exp2_max_kb 4096
  python experiments.py --outdir results --exp1_generators uniform256,zipf128,single_symbol
"""

from __future__ import annotations

import argparse
import bisect
import csv
import math
import random
import statistics
import time
from dataclasses import asdict, dataclass, fields
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import matplotlib.pyplot as plt

import codec
import huffman as huff


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def shannon_entropy(ft: Sequence[int]) -> float:
    """Bits per symbol lower bound for a frequency table."""
    total = sum(ft)
    if total == 0:
        return 0.0
    return -sum((f / total) * math.log2(f / total) for f in ft if f)


# Synthetic dataset generators

def _sample_weighted(rng: random.Random, symbols: Sequence[int], weights: Sequence[float], size: int) -> bytes:
    cdf = []
    acc = 0.0
    total = sum(weights)
    for w in weights:
        acc += w / total
        cdf.append(acc)
    last = len(cdf) - 1
    return bytes(symbols[min(bisect.bisect_left(cdf, rng.random()), last)] for _ in range(size))

def gen_uniform(size: int, alphabet: int = 256, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    return bytes(rng.randrange(0, alphabet) for _ in range(size))

def gen_repetitive(size: int, dominant: int = ord('A'), dom_frac: float = 0.90, seed: int = 0) -> bytes:
    rng = random.Random(seed)
    others = [i for i in range(256) if i != dominant]
    return bytes(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 128, s: float = 1.2, seed: int = 0) -> bytes:
    weights = [1.0 / ((i + 1) ** s) for i in range(alphabet)]
    return _sample_weighted(random.Random(seed), list(range(alphabet)), weights, size)

# relative weight per letter group; uppercase letters get a tenth of lowercase
TEXT_WEIGHTS = ((" ", 13.0), ("\n", 1.5), ("etaoinshrdlu", 6.0), ("cmfwgypbvk", 2.5), ("jxqz", 1.2))

def gen_english_like(size: int, seed: int = 0) -> bytes:
    symbols: List[int] = []
    weights: List[float] = []
    for group, w in TEXT_WEIGHTS:
        for ch in group:
            symbols.append(ord(ch))
            weights.append(w)
            if ch.isalpha():
                symbols.append(ord(ch.upper()))
                weights.append(w / 10)
    return _sample_weighted(random.Random(seed), symbols, weights, size)

def gen_single_symbol(size: int, symbol: int = ord('A')) -> bytes:
    return bytes((symbol,)) * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_uniform(size, alphabet=256, seed=seed),
    "zipf128": lambda size, seed: gen_zipf_like(size, alphabet=128, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dominant=ord('A'), dom_frac=0.99, seed=seed),
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    """
    Unknown names fall back to uniform256 so a typo in a long run does not
    abort everything; the fallback is visible in the dataset name.
    """
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        return f"{name}_fallback_uniform256", gen_uniform(size_bytes, alphabet=256, seed=seed)
    return name, fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    unique_symbols: int

    build_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    compressed_bytes: int
    payload_bytes: int
    compression_ratio: float

    avg_code_length: float
    entropy_bits: float
    correctness_ok: int  # 1 or 0


def run_one(data: bytes) -> MetricRow:
    ft = huff.frequency_table(data)

    # tree + code table on their own, the codec repeats this inside compress
    t0 = now_ns()
    code_map = huff.generate_huffman_codes(huff.build_huffman_tree(ft))
    t1 = now_ns()
    build_ms = ns_to_ms(t1 - t0)

    packed = BytesIO()
    t2 = now_ns()
    result = codec.compress(BytesIO(data), packed)
    t3 = now_ns()
    encode_ms = ns_to_ms(t3 - t2)

    restored = BytesIO()
    packed.seek(0)
    t4 = now_ns()
    codec.decompress(packed, restored)
    t5 = now_ns()
    decode_ms = ns_to_ms(t5 - t4)

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        unique_symbols=sum(1 for f in ft if f),
        build_ms=build_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=encode_ms + decode_ms,
        compressed_bytes=result.compressed_size,
        payload_bytes=result.payload_size,
        compression_ratio=result.compressed_size / max(1, len(data)),
        avg_code_length=huff.average_code_length(code_map, ft),
        entropy_bits=shannon_entropy(ft),
        correctness_ok=1 if restored.getvalue() == data else 0,
    )


def write_metrics(path: Path, rows: List[MetricRow]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=[fl.name for fl in fields(MetricRow)])
        w.writeheader()
        w.writerows(asdict(r) for r in rows)


SUMMARY_METRICS = ("compression_ratio", "encode_ms", "decode_ms", "build_ms", "total_ms", "avg_code_length")

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key_to.setdefault((r.exp_name, r.dataset_name, r.file_size_bytes), []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "n_runs", "entropy_bits"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (exp_name, dataset_name, size_b), items in sorted(key_to.items()):
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "n_runs": len(items),
                "entropy_bits": statistics.mean(x.entropy_bits for x in items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)



# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.bar(x, [mean_for(d, "compression_ratio") for d in datasets])
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bytes / Original Bytes")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_length") for d in datasets], marker="o", label="Huffman code length")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="x", label="Shannon entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length vs Entropy")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_code_length.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    for dist in sorted(set(r.dataset_name for r in exp_rows)):
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        plt.plot(sizes, [mean_size(s, "encode_ms") for s in sizes], marker="o", label="encode")
        plt.plot(sizes, [mean_size(s, "decode_ms") for s in sizes], marker="o", label="decode")
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Codec Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        plt.plot(sizes, [mean_size(s, "compression_ratio") for s in sizes], marker="o")
        plt.xscale("log", base=2)
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Compressed Bytes / Original Bytes")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()



# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def size_series(min_bytes: int, max_bytes: int) -> List[int]:
    sizes: List[int] = []
    s = min_bytes
    while s <= max_bytes:
        sizes.append(s)
        s *= 2
    return sizes

def run_series(exp_name: str, configs: Iterable[Tuple[str, int, int, int]]) -> List[MetricRow]:
    """configs yields (generator name, size in bytes, run id, seed)."""
    rows: List[MetricRow] = []
    for gen_name, size_b, run_id, seed in configs:
        dataset_name, data = generate_dataset(gen_name, size_b, seed)
        row = run_one(data)
        row.exp_name, row.dataset_name, row.run_id = exp_name, dataset_name, run_id
        rows.append(row)
    return rows

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Static Huffman codec experiments.")
    ap.add_argument("--outdir", default="results", help="Where CSV files and charts are written")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per dataset")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Write CSV files only")

    dist = ap.add_argument_group("experiment 1: distributions at a fixed size")
    dist.add_argument("--no_exp1", action="store_true")
    dist.add_argument("--exp1_size_kb", type=int, default=256)
    dist.add_argument("--exp1_generators",
                      default="uniform256,zipf128,repetitive90,repetitive99,english_like,single_symbol",
                      help=f"Comma-separated, any of: {', '.join(GENERATOR_REGISTRY)}")

    scale = ap.add_argument_group("experiment 2: size scaling in powers of two")
    scale.add_argument("--no_exp2", action="store_true")
    scale.add_argument("--exp2_min_kb", type=int, default=4)
    scale.add_argument("--exp2_max_kb", type=int, default=2048)
    scale.add_argument("--exp2_generators", default="uniform256,zipf128,english_like")
    return ap

def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    outdir = Path(args.outdir)
    safe_mkdir(outdir)
    runs = range(1, args.runs + 1)

    rows: List[MetricRow] = []
    if not args.no_exp1:
        size_b = max(1, args.exp1_size_kb) * 1024
        rows += run_series("exp1_distribution", (
            (name, size_b, run_id, args.seed + run_id)
            for name in parse_csv_list(args.exp1_generators) for run_id in runs
        ))
    if not args.no_exp2:
        sizes = size_series(max(1, args.exp2_min_kb) * 1024, max(1, args.exp2_max_kb) * 1024)
        rows += run_series("exp2_size_scaling", (
            (name, size_b, run_id, args.seed + 10_000 + size_b + run_id)
            for name in parse_csv_list(args.exp2_generators) for size_b in sizes for run_id in runs
        ))

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_metrics(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all runs: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
