from __future__ import annotations
import argparse
from pathlib import Path
from ..cache.decoder import AddressDecoder
from ..cache.policy import available_policies
from ..config import CacheGeometry, SimConfig
from ..errors import ConfigurationError
from ..runtime.simulator import run as run_sim
from ..trace.parser import parse_hex_address, read_trace
from ..utils.reporting import format_outcome, generate_report


def _hex_address(value: str) -> int:
    try:
        return parse_hex_address(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def cmd_run(args):
    """Handles the 'run' command."""
    try:
        config = SimConfig.from_args(args)
    except ConfigurationError as e:
        args.parser.error(str(e))

    if not config.trace_file:
        args.parser.error("a trace file is required (-t or 'trace_file' in the config)")
    if not Path(config.trace_file).is_file():
        args.parser.error(f"trace file not found: {config.trace_file}")

    on_outcome = None
    if config.verbose:
        on_outcome = lambda outcome: print(format_outcome(outcome))

    try:
        outcomes, stats = run_sim(read_trace(config.trace_file), config, on_outcome=on_outcome)
    except ConfigurationError as e:
        args.parser.error(str(e))

    if config.report_dir:
        generate_report(outcomes, config, stats)

    print(stats.summary())
    return 0


def cmd_decode(args):
    """Handles the 'decode' command."""
    try:
        geometry = CacheGeometry(args.set_index_bits, 1, args.block_offset_bits)
    except ConfigurationError as e:
        args.parser.error(str(e))

    decoder = AddressDecoder(geometry)
    for address in args.addresses:
        tag, set_index, block_offset = decoder.decode(address)
        print(f"0x{address:x}: tag=0x{tag:x} set={set_index} offset={block_offset}")
    return 0


def build_parser():
    p = argparse.ArgumentParser(
        prog="pycachesim",
        description="Set-associative cache simulator for memory traces",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # --- Run Command ---
    pr = sub.add_parser("run", help="Replay a trace against the cache",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)

    # Config file
    pr.add_argument("-c", "--config", type=str, default=None,
                    help="Path to YAML config file to override defaults")

    # Core args (set default=None to allow override from YAML)
    pr.add_argument("-s", type=int, default=None, dest="set_index_bits",
                    help="Number of set index bits (2^s sets)")
    pr.add_argument("-E", type=int, default=None, dest="lines_per_set",
                    help="Associativity (lines per set)")
    pr.add_argument("-b", type=int, default=None, dest="block_offset_bits",
                    help="Number of block bits (2^b bytes per block)")
    pr.add_argument("-t", "--trace", type=str, default=None, dest="trace_file",
                    help="Trace file to replay")
    pr.add_argument("-v", "--verbose", action="store_true", default=None,
                    help="Print the outcome of every data access")
    pr.add_argument("--policy", type=str, default=None, dest="replacement_policy",
                    choices=available_policies(), help="Replacement policy")
    pr.add_argument("--report", type=str, default=None, dest="report_dir",
                    help="Directory to save the JSON/HTML report")
    pr.set_defaults(func=cmd_run, parser=pr)

    # --- Decode Command ---
    pdc = sub.add_parser("decode", help="Split addresses into tag, set and offset",
                        formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    pdc.add_argument("-s", type=int, default=1, dest="set_index_bits",
                    help="Number of set index bits")
    pdc.add_argument("-b", type=int, default=1, dest="block_offset_bits",
                    help="Number of block bits")
    pdc.add_argument("addresses", nargs="+", type=_hex_address,
                    help="Hex addresses to decode")
    pdc.set_defaults(func=cmd_decode, parser=pdc)

    return p


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    main()
