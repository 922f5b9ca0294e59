#!/usr/bin/env python3
"""
huffman_tool.py : compress / decompress files with static Huffman coding

Usage:
    huffman-tool compress input.txt out.huf [--show-codes]
    huffman-tool decompress out.huf restored.txt
    huffman-tool codes input.txt
    huffman-tool sample sample.txt sample.huf
    huffman-tool                     #interactive menu
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Mapping, Optional

import codec

SAMPLE_TEXT = (
    "This is a sample file for Huffman compression demonstration.\n"
    "You can replace this with any text file.\n"
)


#
#Reporting helpers
#

def format_codes(codes: Mapping[int, str]) -> List[str]:
    lines = ["Huffman Codes (byte -> code):"]
    for sym in sorted(codes):
        if 32 <= sym <= 126:
            lines.append(f"'{chr(sym)}' (ASCII {sym}) : {codes[sym]}")
        else:
            lines.append(f"0x{sym:02X} (ASCII {sym}) : {codes[sym]}")
    return lines

def print_codes(codes: Mapping[int, str]) -> None:
    print("\n".join(format_codes(codes)))

def create_sample_file(path: Path) -> bool:
    """Write the demo text to path unless it already exists. True if created."""
    if path.exists():
        return False
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return True

def error(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)


#
#Commands
#

def compress_and_report(input_path: str, output_path: str) -> Optional[codec.CompressResult]:
    """Compress and print the size summary. None when compression failed."""
    print(f"Compressing '{input_path}' -> '{output_path}' ...")
    try:
        result = codec.compress_file(input_path, output_path)
    except codec.EmptyInputError as exc:
        print(f"[warn] {exc}", file=sys.stderr)
        return None
    except codec.HuffmanError as exc:
        error(f"compression failed: {exc}")
        return None

    before, after = result.original_size, result.compressed_size
    print("Compression successful.")
    print(f"Original size: {before} bytes, Compressed size: {after} bytes")
    print(f"Space saved: {codec.space_saved(before, after):.2f}%")
    return result

def cmd_compress(input_path: str, output_path: str, show_codes: bool = False) -> int:
    result = compress_and_report(input_path, output_path)
    if result is None:
        return 1
    if show_codes:
        print_codes(result.codes)
    return 0

def cmd_decompress(input_path: str, output_path: str) -> int:
    print(f"Decompressing '{input_path}' -> '{output_path}' ...")
    try:
        result = codec.decompress_file(input_path, output_path)
    except codec.TruncatedPayloadError as exc:
        error(f"decompression incomplete, wrote {exc.emitted} of {exc.expected} bytes to '{output_path}'")
        return 1
    except codec.HuffmanError as exc:
        error(f"decompression failed: {exc}")
        return 1
    print(f"Decompression successful: {result.decompressed_size} bytes restored.")
    return 0

def cmd_codes(input_path: str) -> int:
    try:
        with open(input_path, "rb") as fp:
            codes = codec.code_table_for(fp)
    except OSError as exc:
        error(f"cannot open '{input_path}': {exc.strerror or exc}")
        return 1
    except codec.EmptyInputError:
        print("File is empty.")
        return 1
    print_codes(codes)
    return 0

def cmd_sample(sample_path: str, output_path: str) -> int:
    path = Path(sample_path)
    try:
        if create_sample_file(path):
            print(f"Created sample file '{path}'.")
    except OSError as exc:
        error(f"failed to create sample file: {exc}")
        return 1
    return cmd_compress(sample_path, output_path)


#
#Interactive menu
#

MENU = """
-------- Huffman Compressor --------
1. Compress a file
2. Decompress a file
3. Compress sample file (creates sample if missing)
4. Exit"""

def menu_step(ask: Callable[[str], str]) -> bool:
    """Run one menu choice. False once the user asks to exit."""
    print(MENU)
    choice = ask("Enter choice: ").strip()

    if choice == "1":
        inpath = ask("Enter input file path to compress: ").strip()
        outpath = ask("Enter output compressed file path (e.g. out.huf): ").strip()
        result = compress_and_report(inpath, outpath)
        # codes come from the result, the input is not read again
        if result is not None and ask("View Huffman codes for this file? (y/n): ").strip().lower() == "y":
            print_codes(result.codes)
    elif choice == "2":
        inpath = ask("Enter compressed file path to decompress: ").strip()
        outpath = ask("Enter output decompressed file path (e.g. out.txt): ").strip()
        cmd_decompress(inpath, outpath)
    elif choice == "3":
        sample = ask("Enter sample input file path to create/use (e.g. sample.txt): ").strip()
        outpath = ask("Enter compressed output path (e.g. sample.huf): ").strip()
        cmd_sample(sample, outpath)
    elif choice == "4":
        print("Exiting.")
        return False
    else:
        print("Invalid choice, try again.")
    return True

def run_menu(ask: Callable[[str], str] = input) -> int:
    try:
        while menu_step(ask):
            pass
    except EOFError:
        print()
    return 0


#
#Main driver
#

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="huffman-tool", description="Static Huffman file compressor.")
    sub = ap.add_subparsers(dest="command")

    p = sub.add_parser("compress", help="Compress a file")
    p.add_argument("input")
    p.add_argument("output")
    p.add_argument("--show-codes", action="store_true", help="Print the code table after compressing")

    p = sub.add_parser("decompress", help="Decompress a file")
    p.add_argument("input")
    p.add_argument("output")

    p = sub.add_parser("codes", help="Print the Huffman codes of a file without compressing it")
    p.add_argument("input")

    p = sub.add_parser("sample", help="Create a demo file if missing and compress it")
    p.add_argument("sample", help="Sample file path (created when missing)")
    p.add_argument("output")

    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "compress":
        return cmd_compress(args.input, args.output, show_codes=args.show_codes)
    if args.command == "decompress":
        return cmd_decompress(args.input, args.output)
    if args.command == "codes":
        return cmd_codes(args.input)
    if args.command == "sample":
        return cmd_sample(args.sample, args.output)
    return run_menu()


if __name__ == "__main__":
    raise SystemExit(main())
