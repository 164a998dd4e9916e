"""Interactive command: mine templates from lines read on standard input."""

from __future__ import annotations

import argparse
import sys

from .miner import TemplateMiner


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="loggingdrain",
        description="Read log lines from standard input and print their templates.",
    )
    parser.parse_args(argv)

    miner = TemplateMiner()
    print("input q to quit")
    for raw in sys.stdin:
        line = raw.rstrip("\r\n")
        if line == "q":
            print("quit")
            print(miner.status())
            return 0
        response = miner.add_log_message(line)
        print("\nTemplate: %s" % response.template_mined)
    return 0


if __name__ == "__main__":
    sys.exit(main())