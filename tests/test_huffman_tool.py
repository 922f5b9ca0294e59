import pytest

import huffman_tool


def test_format_codes_printable_and_hex():
    lines = huffman_tool.format_codes({ord('a'): '0', 10: '10', 200: '11'})
    assert lines[0] == "Huffman Codes (byte -> code):"
    assert lines[1:] == [
        "0x0A (ASCII 10) : 10",
        "'a' (ASCII 97) : 0",
        "0xC8 (ASCII 200) : 11",
    ]


def test_compress_then_decompress(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_bytes(b"aaab" * 1000)
    packed = tmp_path / "in.huf"
    out = tmp_path / "out.txt"

    assert huffman_tool.main(["compress", str(src), str(packed), "--show-codes"]) == 0
    text = capsys.readouterr().out
    assert "Compression successful." in text
    assert "Original size: 4000 bytes" in text
    assert "Space saved:" in text
    assert "'a' (ASCII 97) : 1" in text

    assert huffman_tool.main(["decompress", str(packed), str(out)]) == 0
    assert out.read_bytes() == src.read_bytes()
    assert "4000 bytes restored" in capsys.readouterr().out


def test_compress_empty_file_fails(tmp_path, capsys):
    src = tmp_path / "empty.txt"
    src.write_bytes(b"")
    assert huffman_tool.main(["compress", str(src), str(tmp_path / "x.huf")]) == 1
    assert "empty" in capsys.readouterr().err
    assert not (tmp_path / "x.huf").exists()


def test_compress_missing_file_fails(tmp_path, capsys):
    assert huffman_tool.main(["compress", str(tmp_path / "nope"), str(tmp_path / "x.huf")]) == 1
    assert "cannot open" in capsys.readouterr().err


def test_decompress_truncated_reports_counts(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_bytes(b"hello huffman world " * 50)
    packed = tmp_path / "in.huf"
    huffman_tool.main(["compress", str(src), str(packed)])
    packed.write_bytes(packed.read_bytes()[:-30])
    capsys.readouterr()

    assert huffman_tool.main(["decompress", str(packed), str(tmp_path / "out.txt")]) == 1
    err = capsys.readouterr().err
    assert "decompression incomplete" in err
    assert "of 1000 bytes" in err


def test_codes_command(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_bytes(b"zzzz")
    assert huffman_tool.main(["codes", str(src)]) == 0
    assert "'z' (ASCII 122) : 0" in capsys.readouterr().out

    empty = tmp_path / "empty.txt"
    empty.write_bytes(b"")
    assert huffman_tool.main(["codes", str(empty)]) == 1
    assert "File is empty." in capsys.readouterr().out


def test_sample_command_creates_and_compresses(tmp_path, capsys):
    sample = tmp_path / "sample.txt"
    packed = tmp_path / "sample.huf"
    assert huffman_tool.main(["sample", str(sample), str(packed)]) == 0
    assert sample.read_text(encoding="utf-8") == huffman_tool.SAMPLE_TEXT
    assert packed.exists()
    assert "Created sample file" in capsys.readouterr().out

    # existing sample is left alone
    sample.write_text("custom", encoding="utf-8")
    assert huffman_tool.main(["sample", str(sample), str(packed)]) == 0
    assert sample.read_text(encoding="utf-8") == "custom"


def test_menu_compress_and_exit(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_bytes(b"menu driven input")
    packed = tmp_path / "in.huf"
    answers = iter(["1", str(src), str(packed), "y", "9", "4"])

    assert huffman_tool.run_menu(ask=lambda prompt: next(answers)) == 0
    out = capsys.readouterr().out
    assert "Compression successful." in out
    assert "Huffman Codes (byte -> code):" in out
    assert "Invalid choice, try again." in out
    assert "Exiting." in out
    assert packed.exists()


def answers_then_eof(answers):
    pending = iter(answers)

    def ask(prompt):
        try:
            return next(pending)
        except StopIteration:
            raise EOFError from None

    return ask


@pytest.mark.parametrize("answers", [
    [],
    ["1"],
    ["1", "in.txt"],
    ["2"],
    ["2", "in.huf"],
    ["3", "sample.txt"],
    ["9"],
])
def test_menu_stops_on_eof_at_any_prompt(answers, capsys):
    assert huffman_tool.run_menu(ask=answers_then_eof(answers)) == 0


def test_menu_stops_on_eof_at_view_codes_prompt(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_bytes(b"abc")
    packed = tmp_path / "in.huf"
    assert huffman_tool.run_menu(ask=answers_then_eof(["1", str(src), str(packed)])) == 0
    assert packed.exists()


def test_menu_shows_codes_of_the_written_archive(tmp_path, capsys):
    src = tmp_path / "in.txt"
    src.write_bytes(b"aaab")
    packed = tmp_path / "in.huf"
    answers = iter(["1", str(src), str(packed), "y", "4"])

    def ask(prompt):
        if prompt.startswith("View Huffman codes"):
            # the input is gone, so the codes must come from the compression itself
            src.unlink()
        return next(answers)

    assert huffman_tool.run_menu(ask=ask) == 0
    captured = capsys.readouterr()
    assert "'a' (ASCII 97) : 1" in captured.out
    assert "'b' (ASCII 98) : 0" in captured.out
    assert "cannot open" not in captured.err


def test_unknown_command_exits_with_usage():
    with pytest.raises(SystemExit):
        huffman_tool.main(["explode"])
