# Command line entry point for the chromamark watermark tool

import argparse                               # CLI parsing
import logging

from chromamark import attacks, codec, image_io, metrics
from chromamark.config import WatermarkConfig, WATERMARK_SIZE, DWT_LEVELS, DCT_BLOCK_SIZE, SIGMA
from chromamark.detect import detect_file_type, is_lossy

logger = logging.getLogger("chromamark")


def _configure_logging(level):
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _parse_size(text):
    try:
        width, height = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {text!r}")
    return width, height


def _build_parser():
    parser = argparse.ArgumentParser(description="DWT-DCT chroma watermarking tool")
    parser.add_argument("--embed", action="store_true", help="Embed a watermark bitmap into an image")
    parser.add_argument("--extract", action="store_true", help="Recover the watermark from an image")
    parser.add_argument("--attack", action="store_true", help="Degrade an image to test robustness")
    parser.add_argument("--input", required=True, help="Input image path")
    parser.add_argument("--output", help="Output image path")
    parser.add_argument("--watermark", help="Watermark bitmap path (for embedding)")
    parser.add_argument("--preview", help="Also save a visualization of the embedded delta (embed)")
    parser.add_argument("--original-size", type=_parse_size,
                        help="Resize the input to WIDTHxHEIGHT before extracting")
    parser.add_argument("--reference", help="Original watermark to score the recovered one against")
    parser.add_argument("--attack-type", choices=sorted(attacks.ATTACKS), default="jpeg")
    parser.add_argument("--level", type=float, default=25,
                        help="Distortion percent for --attack (jpeg quality = 100 - level)")
    parser.add_argument("--watermark-size", type=int, default=WATERMARK_SIZE)
    parser.add_argument("--dwt-levels", type=int, default=DWT_LEVELS)
    parser.add_argument("--dct-block-size", type=int, default=DCT_BLOCK_SIZE)
    parser.add_argument("--sigma", type=float, default=SIGMA, help="Embedding strength")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    config = WatermarkConfig(
        watermark_size=args.watermark_size,
        dwt_levels=args.dwt_levels,
        dct_block_size=args.dct_block_size,
        sigma=args.sigma,
    ).validate()
    logger.info("Using %r", config)

    file_type = detect_file_type(args.input)
    print("Detected file type:", file_type)
    if file_type == "unknown":
        # Pillow may still know the format; read_pixels raises if it does not
        logger.warning("Unrecognised signature for %s, trying Pillow anyway", args.input)

    # -------- EMBED --------
    if args.embed:
        if not args.watermark:
            raise ValueError("Missing --watermark for embedding.")
        if not args.output:
            raise ValueError("Missing --output for embedding.")

        host = image_io.read_pixels(args.input)
        if not codec.is_embeddable(host.shape, config):
            raise ValueError(
                f"Input image is smaller than the {config.embed_size}x{config.embed_size} embed region."
            )
        mark = image_io.read_pixels(args.watermark)
        marked = codec.embed_watermark(host, mark, config)
        image_io.write_pixels(args.output, marked)

        if args.preview:
            delta = codec.compute_embed_delta(mark, config)
            image_io.write_pixels(args.preview, image_io.render_delta_preview(delta))

        print(f"Embedded watermark into {args.output}")
        print(f"PSNR(host, watermarked): {metrics.psnr(host, image_io.read_pixels(args.output)):.2f} dB")
        return

    # -------- EXTRACT --------
    elif args.extract:
        if not args.output:
            raise ValueError("Missing --output for extraction.")
        if is_lossy(file_type):
            logger.info("Input is lossy; some watermark bits may flip")

        candidate = image_io.read_pixels(args.input)
        if args.original_size:
            candidate = image_io.resample(candidate, args.original_size)

        recovered = codec.extract_watermark(candidate, config)
        image_io.write_pixels(args.output, recovered)
        print(f"Extracted watermark to {args.output}")

        if args.reference:
            reference = image_io.read_pixels(args.reference)
            print(f"Bit accuracy: {metrics.bit_accuracy(reference, recovered) * 100:.2f}%")
        return

    # -------- ATTACK --------
    elif args.attack:
        if not args.output:
            raise ValueError("Missing --output for attack.")
        pixels = image_io.read_pixels(args.input)
        attacked = attacks.ATTACKS[args.attack_type](pixels, args.level)
        image_io.write_pixels(args.output, attacked)
        print(f"Applied {args.attack_type} ({args.level}%) to {args.output}")
        return

    else:
        print("No operation specified.")


if __name__ == "__main__":
    main()
