import argparse
import logging
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication

from GF_Libs.EditorLib.mask_editor_window import MaskEditorWindow
from GF_Libs.FillServiceLib.fill_client import GeminiFillClient
from GF_Libs.FillServiceLib.generation_session import GenerationSession


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Paint a mask and fill it with an image model.")
    parser.add_argument("image", nargs="?", type=Path, help="Source image to open")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    generation = GenerationSession(GeminiFillClient())
    window = MaskEditorWindow(generation, source_path=args.image)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
