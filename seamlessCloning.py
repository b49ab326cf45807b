import numpy as np
import cv2
from loguru import logger

from config import settings
from gaussSeidel import solve
from placeMask import mask_bounding_rect
from poisson import build_equation, build_index_map, scatter_result


def ensure_rgb(img):
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
    if img.shape[2] == 4:
        return img[:, :, :3]
    return img


def solve_channel(src, dst, mask, index, count, mixed=False,
                  max_iters=None, eps=None, row_capacity=None, progress=None):
    A, b, x = build_equation(
        src, dst, mask, index, count,
        max_cols=row_capacity if row_capacity is not None else settings.row_capacity,
        mixed=mixed,
    )
    split = A.calc_split()
    result = solve(
        A, split, b, x,
        max_iters=max_iters if max_iters is not None else settings.max_iters,
        eps=eps if eps is not None else settings.eps,
        progress=progress,
        report_every=settings.report_every,
    )
    scatter_result(x, mask, index, dst)
    return result


def seamless_clone(destination, source, mask, offset=(0, 0), mixed=False,
                   max_iters=None, eps=None, progress=None):
    mask = np.asarray(mask).astype(bool)
    if mask.shape != source.shape[:2]:
        raise ValueError(f"Máscara com shape {mask.shape} não corresponde à fonte {source.shape[:2]}")
    if destination.dtype != np.uint8 or source.dtype != np.uint8:
        raise ValueError("As imagens precisam ser uint8")

    if not (destination.ndim == source.ndim == 2):
        if 4 in (destination.shape[2:] + source.shape[2:]):
            logger.debug("Canal alfa descartado, a saída será RGB")
        destination = ensure_rgb(destination)
        source = ensure_rgb(source)

    out = destination.copy()
    if not np.any(mask):
        logger.info("Máscara vazia, destino inalterado")
        return out, []

    top, left, bottom, right = mask_bounding_rect(mask)
    oy, ox = offset
    h_t, w_t = out.shape[:2]
    if top + oy < 0 or left + ox < 0 or bottom + oy > h_t or right + ox > w_t:
        raise ValueError(
            f"A região ({top}:{bottom}, {left}:{right}) deslocada por {offset} não cabe no destino {h_t}x{w_t}"
        )

    roi_mask = mask[top:bottom, left:right]
    index, count = build_index_map(roi_mask)

    src_roi = source[top:bottom, left:right]
    dst_roi = out[top + oy:bottom + oy, left + ox:right + ox]

    if out.ndim == 2:
        channels = [(src_roi, dst_roi)]
    else:
        channels = [(src_roi[:, :, c], dst_roi[:, :, c]) for c in range(out.shape[2])]

    results = []
    for c, (src_c, dst_c) in enumerate(channels):
        result = solve_channel(
            src_c, dst_c, roi_mask, index, count,
            mixed=mixed, max_iters=max_iters, eps=eps, progress=progress,
        )
        logger.info(
            f"Canal {c}: {result.iterations} iterações, convergiu={result.converged}, "
            f"resíduo={result.residual:.4g}"
        )
        results.append(result)

    return out, results
