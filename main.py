# main.py

import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from gui import MainWindow


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="quickcalc", description="QuickCalc desktop calculators")
    p.add_argument("link", nargs="?", help="shared converter link or query string, e.g. 'v=10&from=lb&to=kg'")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args, _qt_args = p.parse_known_args(argv)
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    window = MainWindow(share_link=args.link)
    window.resize(1000, 700)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
