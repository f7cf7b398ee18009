from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from basic_fits.config import settings_from_any
from basic_fits.errors import FitsDecodeError, UnsupportedBitpix
from basic_fits.fits import DecodedFits
from basic_fits.header import Header
from basic_fits.io import read_fits_file, read_fits_header
from basic_fits.log import setup_logging, timer
from basic_fits.render import log_stretch, to_ascii
from basic_fits.stats import describe
from basic_fits.version import get_version_info


log = logging.getLogger("basic_fits")

# soft_wrap: long paths and preview lines are never folded
console = Console(soft_wrap=True, highlight=False)
print = console.print


def _print_summary(path: Path, header: Header) -> None:
    print(f"[bold]File {escape(str(path))}:[/bold]")
    print(f"SIMPLE {'T' if header.simple else 'F'}")
    print(f"BITPIX {header.bitpix.code}")
    print(f"NAXIS  {int(header.naxis)}")
    print(f"Axes   {list(header.axes)}")


def _print_keywords(header: Header) -> None:
    for line in header.format_keywords():
        print(escape(line))


def _print_data(res: DecodedFits, args: argparse.Namespace) -> None:
    if res.data is None:
        print("\n[yellow]No data unit.[/yellow]")
        return

    print("\n[bold]Data:[/bold]")
    try:
        st = describe(res.data)
    except ValueError:
        print(f"Count: {len(res.data)}")
        print("[yellow]No finite values, nothing to summarize or preview.[/yellow]")
        return
    print(f"Count: {st.count}")
    print(f"Sum: {st.sum:.2e}")
    print(f"Avg: {st.mean:.2e}")
    print(f"Std: {st.std:.2e}")
    print(f"Min / max : {st.min} / {st.max}")

    if args.no_image or int(res.header.naxis) != 2:
        return

    img = res.data.as_array()
    vmin = st.min if args.vmin is None else args.vmin
    vmax = st.max if args.vmax is None else args.vmax
    if args.log and vmin > -1:
        img = log_stretch(img, vmin, vmax)
        vmin = vmax = None
    print("\n[bold]Image:[/bold]")
    for line in to_ascii(img, width=args.width, vmin=vmin, vmax=vmax):
        print(escape(line))


def _cmd_inspect(args: argparse.Namespace) -> int:
    path = Path(args.file)
    settings = settings_from_any(args.config)
    with timer(f"decode {path.name}", log):
        try:
            res = read_fits_file(path, settings)
        except UnsupportedBitpix as e:
            if e.header is None:
                raise
            _print_summary(path, e.header)
            if args.keywords:
                _print_keywords(e.header)
            print(f"\n[yellow]{escape(str(e))}[/yellow]")
            return 0

    _print_summary(path, res.header)
    if args.keywords:
        print("")
        _print_keywords(res.header)
    _print_data(res, args)
    return 0


def _cmd_header(args: argparse.Namespace) -> int:
    header = read_fits_header(args.file, settings_from_any(args.config))
    _print_keywords(header)
    return 0


def _cmd_version(_args: argparse.Namespace) -> int:
    v = get_version_info()
    print(f"basic-fits {v.package_version} (python {v.python}, numpy {v.numpy}, {v.platform})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="basic-fits", description="Decode basic (single HDU) FITS files")
    p.add_argument(
        "--log-level",
        default=None,
        help="CRITICAL|ERROR|WARNING|INFO|DEBUG (or env BASIC_FITS_LOG_LEVEL)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print version and exit")

    p_ins = sub.add_parser("inspect", help="Header summary, statistics and an ASCII preview")
    p_ins.add_argument("file")
    p_ins.add_argument("--config", default=None, help="Decoder settings YAML")
    p_ins.add_argument("--keywords", action="store_true", help="Also list all keywords")
    p_ins.add_argument("--no-image", action="store_true", help="Skip the ASCII preview")
    p_ins.add_argument("--vmin", type=float, default=None)
    p_ins.add_argument("--vmax", type=float, default=None)
    p_ins.add_argument("--log", action="store_true", help="log10(1+x) stretch of the preview")
    p_ins.add_argument("--width", type=int, default=80, help="Preview width in characters")

    p_hdr = sub.add_parser("header", help="List the header keywords")
    p_hdr.add_argument("file")
    p_hdr.add_argument("--config", default=None, help="Decoder settings YAML")

    return p


_COMMANDS = {
    "inspect": _cmd_inspect,
    "header": _cmd_header,
    "version": _cmd_version,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        return _COMMANDS[args.cmd](args)
    except (FitsDecodeError, OSError, ValueError) as e:
        # FitsDecodeError messages start with their [CODE]
        print(f"[red]{escape(getattr(args, 'file', '?'))}: {escape(str(e))}[/red]")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
