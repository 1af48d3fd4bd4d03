import argparse
import os
import sys
from typing import Optional, Tuple

from codec import DecodeError, HuffmanCodec

PAYLOAD_SUFFIX = ".hfm"  #: Extension of compressed payload files
CODEBOOK_SUFFIX = ".config"  #: Appended to the payload path for the codebook
ENCODING = "utf-8"  #: Text encoding of source, codebook and restored files


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Huffman compressor for text files"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    compress = subparsers.add_parser(
        "compress", aliases=["c"], help="Compress a text file"
    )
    compress.add_argument("source", help="Text file to compress")
    compress.add_argument(
        "-o",
        "--output",
        help="Payload file path (default: source name with "
        f"{PAYLOAD_SUFFIX} extension)",
    )
    compress.add_argument(
        "-q", "--quiet", action="store_true", help="Do not print a report"
    )

    decompress = subparsers.add_parser(
        "decompress", aliases=["d"], help="Restore a compressed text file"
    )
    decompress.add_argument("payload", help="Compressed payload file")
    decompress.add_argument(
        "-c",
        "--codebook",
        help=f"Codebook file (default: payload path + {CODEBOOK_SUFFIX})",
    )
    decompress.add_argument(
        "-o", "--output", required=True, help="Path of the restored text file"
    )
    decompress.add_argument(
        "-q", "--quiet", action="store_true", help="Do not print a report"
    )

    return parser


def _output_paths(source: str, output: Optional[str] = None) -> Tuple[str, str]:
    """Derive the payload and codebook paths for ``source``.

    ``notes.txt`` becomes ``notes.hfm`` and ``notes.hfm.config``.

    :param source: Path of the text file being compressed.
    :type source: str
    :param output: Explicit payload path, if given.
    :type output: Optional[str]
    :returns: Tuple ``(payload_path, codebook_path)``.
    :rtype: Tuple[str, str]
    """
    if output is None:
        output = os.path.splitext(source)[0] + PAYLOAD_SUFFIX
    return output, output + CODEBOOK_SUFFIX


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def _fmt_ratio(after: int, before: int) -> str:
    """Format compressed size as a percentage of the original size.

    :param after: Size after compression.
    :type after: int
    :param before: Size before compression.
    :type before: int
    :returns: Percentage, or ``n/a`` when ``before`` is zero.
    :rtype: str
    """
    if before <= 0:
        return "n/a"
    return f"{100.0 * after / before:.2f}%"


def _read_text(path: str) -> str:
    """Read a whole text file, keeping its line endings as written.

    :param path: File to read.
    :type path: str
    :returns: File contents.
    :rtype: str
    :raises OSError: If the file cannot be opened or read.
    :raises UnicodeDecodeError: If the file is not valid text.
    """
    with open(path, "r", encoding=ENCODING, newline="") as f:
        return f.read()


def _write_text(path: str, text: str) -> None:
    """Write ``text`` to ``path`` without translating line endings.

    :param path: File to write.
    :type path: str
    :param text: Contents to write.
    :type text: str
    :returns: None
    :rtype: None
    :raises OSError: If the file cannot be written.
    """
    with open(path, "w", encoding=ENCODING, newline="") as f:
        f.write(text)


def compress_file(
    source: str, output: Optional[str] = None, quiet: bool = False
) -> int:
    """Compress ``source`` into a payload file and a codebook file.

    :param source: Text file to compress.
    :type source: str
    :param output: Payload path; derived from ``source`` when omitted.
    :type output: Optional[str]
    :param quiet: Whether to suppress the report.
    :type quiet: bool
    :returns: Process exit status.
    :rtype: int
    """
    try:
        text = _read_text(source)
    except FileNotFoundError:
        print(f"[!] Source file not found: {source}")
        return 1
    except OSError as e:
        print(f"[!] Could not read source file {source}: {e.strerror}")
        return 1
    except UnicodeDecodeError:
        print(f"[!] Source file is not {ENCODING} text: {source}")
        return 1

    payload, codebook = HuffmanCodec().compress(text)
    payload_path, codebook_path = _output_paths(source, output)
    try:
        with open(payload_path, "wb") as out:
            out.write(payload)
        _write_text(codebook_path, codebook)
    except OSError as e:
        print(f"[!] Could not write {e.filename}: {e.strerror}")
        return 1

    if not quiet:
        size_before = len(text.encode(ENCODING))
        size_after = len(payload)
        print("Compressed to: ", payload_path)
        print("Codebook: ", codebook_path)
        print("Size before compression: ", _fmt_bytes(size_before))
        print("Size after compression: ", _fmt_bytes(size_after))
        print("Compression ratio: ", _fmt_ratio(size_after, size_before))
    return 0


def decompress_file(
    payload_path: str,
    output: str,
    codebook_path: Optional[str] = None,
    quiet: bool = False,
) -> int:
    """Restore the text of ``payload_path`` into ``output``.

    :param payload_path: Compressed payload file.
    :type payload_path: str
    :param output: Path of the restored text file.
    :type output: str
    :param codebook_path: Codebook file; ``payload_path`` plus
        ``.config`` when omitted.
    :type codebook_path: Optional[str]
    :param quiet: Whether to suppress the report.
    :type quiet: bool
    :returns: Process exit status.
    :rtype: int
    """
    if codebook_path is None:
        codebook_path = payload_path + CODEBOOK_SUFFIX
    try:
        with open(payload_path, "rb") as f:
            payload = f.read()
    except FileNotFoundError:
        print(f"[!] Payload file not found: {payload_path}")
        return 1
    except OSError as e:
        print(f"[!] Could not read payload file {payload_path}: {e.strerror}")
        return 1
    try:
        codebook = _read_text(codebook_path)
    except FileNotFoundError:
        print(f"[!] Codebook file not found: {codebook_path}")
        return 1
    except OSError as e:
        print(f"[!] Could not read codebook file {codebook_path}: {e.strerror}")
        return 1
    except UnicodeDecodeError:
        print(f"[!] Codebook file is not {ENCODING} text: {codebook_path}")
        return 1

    try:
        text = HuffmanCodec().decompress(payload, codebook)
    except DecodeError as e:
        print(f"[!] Could not decode {payload_path}: {e}")
        return 1

    try:
        _write_text(output, text)
    except OSError as e:
        print(f"[!] Could not write {output}: {e.strerror}")
        return 1
    if not quiet:
        print("Restored to: ", output)
    return 0


def main(argv=None):
    """Entry point for the CLI tool.

    :param argv: Arguments to parse instead of ``sys.argv[1:]``.
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    if args.cmd in ["compress", "c"]:
        return compress_file(args.source, args.output, args.quiet)
    elif args.cmd in ["decompress", "d"]:
        return decompress_file(
            args.payload, args.output, args.codebook, args.quiet
        )
    return 2


if __name__ == "__main__":
    sys.exit(main())
