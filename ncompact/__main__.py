"""
CLI entry point. Run as: python -m ncompact --demo <name>
"""

import argparse

from .demos import DEMOS
from .global_validation import load
from .report import print_feedback, print_instantiations


def main():
    parser = argparse.ArgumentParser(description="Global n-compact validation")
    parser.add_argument(
        "--demo",
        choices=list(DEMOS.keys()),
        default="modus_ponens",
        help="Which sample document to validate",
    )
    parser.add_argument("--passes", type=int, default=None,
                        help="Instantiation passes (default: the demo's own)")
    parser.add_argument("--no-preemies", action="store_true",
                        help="Skip the preemie check")
    parser.add_argument("--list",  action="store_true", help="List the demos and exit")
    parser.add_argument("--quiet", action="store_true", help="Less output")
    args = parser.parse_args()

    if args.list:
        for name, demo in DEMOS.items():
            print(f"  {name:16} {demo['description']}")
        return

    demo = DEMOS[args.demo]
    n = demo["n"] if args.passes is None else args.passes

    print(f"Demo: {args.demo} ({demo['description']})")
    print(f"User content: {demo['user']}")

    doc = load(demo["user"], demo["libs"], n=n,
               check_preemies=not args.no_preemies, verbose=not args.quiet)

    if not args.quiet:
        print_instantiations(doc)
    print_feedback(doc)


if __name__ == "__main__":
    main()
