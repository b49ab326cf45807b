import argparse
import sys

import numpy as np
from imageio import imread, imwrite
from loguru import logger

import placeMask
import seamlessCloning as sc
from config import settings


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Poisson image editing: seamless cloning")
    parser.add_argument("destination", help="imagem de destino")
    parser.add_argument("source", help="imagem fonte")
    parser.add_argument("output", help="arquivo de saída")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--contour", help='pontos do contorno na fonte, ex: "40,40 40,150 100,150"')
    group.add_argument("--mask", help="imagem da máscara (branco = região)")
    parser.add_argument("--offset", default="0,0", help="deslocamento dy,dx no destino")
    parser.add_argument("--mixed", action="store_true", help="usar gradientes mistos")
    parser.add_argument("--max-iters", type=int, default=settings.max_iters)
    parser.add_argument("--eps", type=float, default=settings.eps)
    return parser.parse_args(argv)


def parse_offset(text):
    try:
        dy, dx = (int(v) for v in text.split(","))
    except ValueError:
        raise ValueError(f"Deslocamento inválido '{text}', use o formato dy,dx") from None
    return dy, dx


def progress(iteration, converged):
    if converged:
        print(f"convergiu na iteração {iteration}")
    else:
        print(f"iteração {iteration}")


def run(args):
    target = imread(args.destination).astype(np.uint8)
    source = imread(args.source).astype(np.uint8)

    if args.mask:
        mask_src = placeMask.load_mask(args.mask)
    else:
        if args.contour:
            points = placeMask.parse_points(args.contour)
        else:
            points = placeMask.select_contour(sc.ensure_rgb(source))
        mask_src = placeMask.mask_from_contour(points, source.shape)

    out, results = sc.seamless_clone(
        target, source, mask_src,
        offset=parse_offset(args.offset),
        mixed=args.mixed,
        max_iters=args.max_iters,
        eps=args.eps,
        progress=progress,
    )
    imwrite(args.output, out)
    return results


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    print("--- POISSON IMAGE EDITING ---")
    try:
        run(parse_args())
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    print("Done.")
