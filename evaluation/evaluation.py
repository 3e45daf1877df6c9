#!/usr/bin/env python3
"""
Evaluation runner for the Huffman compressor.

This evaluation script:
- Compresses and restores every input file (or a built-in sample set)
- Records sizes, compression ratio, round-trip and integrity results per input
- Generates a structured JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [files ...] [--output report.json]
"""
import os
import sys
import json
import uuid
import random
import platform
import subprocess
import time
from datetime import datetime
from pathlib import Path

# Make the flat modules importable when run as a script
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from huffman_errors import HuffmanError
from huffman_service import HuffmanService


SAMPLE_TEXT = (
    b"It was the best of times, it was the worst of times, it was the age of "
    b"wisdom, it was the age of foolishness, it was the epoch of belief, it "
    b"was the epoch of incredulity, it was the season of Light, it was the "
    b"season of Darkness.\n"
)


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    for key, cmd in (
        ("git_commit", ["git", "rev-parse", "HEAD"]),
        ("git_branch", ["git", "rev-parse", "--abbrev-ref", "HEAD"]),
    ):
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                cwd=PROJECT_ROOT,
                timeout=5
            )
        except (OSError, subprocess.SubprocessError):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value

    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "os_release": platform.release(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def sample_inputs():
    """Built-in inputs covering skewed, degenerate, empty and flat data."""
    rng = random.Random(1234)
    return {
        "english_text": SAMPLE_TEXT * 40,
        "single_symbol": b"A" * 1000,
        "empty": b"",
        "all_bytes": bytes(range(256)) * 4,
        "random_4kb": bytes(rng.getrandbits(8) for _ in range(4096)),
    }


def evaluate_input(name, data, service=None):
    """
    Compress and restore one input.

    Args:
        name: Label stored as the filename inside the container
        data: Raw bytes to compress
        service: HuffmanService to use (a new one by default)

    Returns:
        dict with sizes, ratio, timings and validation results
    """
    service = service or HuffmanService()
    result = {"name": name, "original_size": len(data)}

    try:
        t0 = time.perf_counter()
        compressed = service.compress(data, name)
        t1 = time.perf_counter()
        restored = service.decompress(compressed)
        t2 = time.perf_counter()
    except HuffmanError as e:
        result.update({"success": False, "error": str(e)})
        return result

    original_size = len(data)
    result.update({
        "success": restored.data == data and restored.status.ok,
        "error": None,
        "compressed_size": len(compressed),
        "ratio": round(100.0 * (1 - len(compressed) / original_size), 2) if original_size else 0.0,
        "roundtrip_ok": restored.data == data,
        "crc32_ok": restored.status.crc32_ok,
        "sha256_ok": restored.status.sha256_ok,
        "compress_seconds": round(t1 - t0, 6),
        "decompress_seconds": round(t2 - t1, 6),
    })
    return result


def run_evaluation(inputs):
    """
    Run the round-trip evaluation over every input.

    Returns dict with per-input results and a summary.
    """
    print(f"\n{'=' * 60}")
    print("HUFFMAN COMPRESSION EVALUATION")
    print(f"{'=' * 60}")

    service = HuffmanService()
    results = [evaluate_input(name, data, service) for name, data in inputs.items()]

    for result in results:
        status_icon = "✅" if result["success"] else "❌"
        if result.get("error"):
            print(f"  {status_icon} {result['name']}: {result['error']}")
        else:
            print(
                f"  {status_icon} {result['name']}: {result['original_size']} -> "
                f"{result['compressed_size']} bytes ({result['ratio']:.2f}%)"
            )

    passed = sum(1 for r in results if r["success"])
    summary = {
        "total": len(results),
        "passed": passed,
        "failed": len(results) - passed,
    }
    print(f"\nResults: {passed}/{len(results)} inputs round-tripped with valid checksums")

    return {"results": results, "summary": summary}


def load_inputs(paths):
    inputs = {}
    for path in paths:
        with open(path, "rb") as f:
            inputs[os.path.basename(path)] = f.read()
    return inputs


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    date_str = now.strftime("%Y-%m-%d")
    time_str = now.strftime("%H-%M-%S")

    output_dir = Path(PROJECT_ROOT) / "evaluation" / date_str / time_str
    output_dir.mkdir(parents=True, exist_ok=True)

    return output_dir / "report.json"


def main(argv=None):
    """Main entry point for evaluation."""
    import argparse

    parser = argparse.ArgumentParser(description="Run Huffman compression evaluation")
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Files to evaluate (default: built-in samples)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)"
    )

    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()

    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    try:
        inputs = load_inputs(args.inputs) if args.inputs else sample_inputs()
        results = run_evaluation(inputs)
        success = results["summary"]["failed"] == 0
        error_message = None if success else "Some inputs failed to round-trip"
    except OSError as e:
        print(f"\nERROR: {e}")
        results = None
        success = False
        error_message = str(e)

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "error": error_message,
        "environment": get_environment_info(),
        "results": results,
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")

    print(f"\n{'=' * 60}")
    print(f"EVALUATION COMPLETE")
    print(f"{'=' * 60}")
    print(f"Run ID: {run_id}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
