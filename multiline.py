import argparse
import logging
import sys

from line_chart.config import load_settings, save_settings
from line_chart.data_model import LoadError
from line_chart.loader import load_dataset
from line_chart.renderer import render_image
from line_chart.scales import SurfaceSize, build_scales


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Interactive multi-series line chart.")
    p.add_argument("source", nargs="?", help="TSV file path or http(s) URL")
    p.add_argument("--label", help="unit label shown on the value axis")
    p.add_argument("--png", metavar="OUT", help="render to a PNG file instead of opening a window")
    p.add_argument("--width", type=int, default=800, help="PNG width in pixels")
    p.add_argument("--height", type=int, default=500, help="PNG height in pixels")
    p.add_argument("--save", action="store_true", help="remember the source and label in the config file")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def export_png(settings, out: str, width: int, height: int) -> int:
    try:
        dataset = load_dataset(settings.source, settings)
    except (LoadError, ValueError) as e:
        logging.error("%s", e)
        return 1
    size = SurfaceSize(width=width, height=height, margins=settings.margins())
    render_image(dataset, build_scales(dataset, size), size).save(out)
    logging.info("Wrote %s", out)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    if args.source:
        settings.source = args.source
    if args.label:
        settings.label = args.label
    if args.save:
        save_settings(settings)
        logging.info("Saved settings (source=%s)", settings.source)

    if args.png:
        return export_png(settings, args.png, args.width, args.height)

    # imported late so headless exports never need a display
    from line_chart.ui_window import ChartWindow

    app = ChartWindow(settings)
    app.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
