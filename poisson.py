import numpy as np
from loguru import logger

from sparseRows import SparseRowMatrix, UNUSED

ROW_CAPACITY = 8


def neighbors_4(y, x, h, w):
    for ny, nx in ((y-1, x), (y+1, x), (y, x-1), (y, x+1)):
        if 0 <= ny < h and 0 <= nx < w:
            yield ny, nx


def _as_mask(mask):
    mask = np.asarray(mask)
    if mask.ndim != 2 or mask.size == 0:
        raise ValueError(f"A máscara precisa ser 2D e não vazia, recebido shape {mask.shape}")
    return mask.astype(bool)


def _check_channel(name, img, shape):
    if img.ndim != 2:
        raise ValueError(f"{name} precisa ter um único canal, recebido shape {img.shape}")
    if img.dtype != np.uint8:
        raise ValueError(f"{name} precisa ser uint8, recebido {img.dtype}")
    if img.shape != shape:
        raise ValueError(f"{name} tem shape {img.shape}, esperado {shape}")


def build_index_map(mask):
    mask = _as_mask(mask)
    h, w = mask.shape
    idx = np.full((h, w), UNUSED, dtype=int)
    coords = np.argwhere(mask)
    idx[coords[:, 0], coords[:, 1]] = np.arange(len(coords))
    return idx, len(coords)


def build_equation(src, dst, mask, index, count, max_cols=ROW_CAPACITY, mixed=False):
    mask = _as_mask(mask)
    h, w = mask.shape
    _check_channel("src", src, mask.shape)
    _check_channel("dst", dst, mask.shape)
    if index.shape != mask.shape or index.dtype.kind not in "iu":
        raise ValueError(f"Índice inválido: shape {index.shape}, dtype {index.dtype}")
    if count != int(mask.sum()):
        raise ValueError(f"count={count} não corresponde aos {int(mask.sum())} pixels da máscara")

    src = src.astype(np.float64)
    dst = dst.astype(np.float64)

    A = SparseRowMatrix(count, max_cols)
    b = np.zeros(count, dtype=np.float64)
    x = np.zeros(count, dtype=np.float64)

    for y, xp in np.argwhere(mask):
        k = index[y, xp]
        degree = 0
        b_val = 0.0

        for ny, nx in neighbors_4(y, xp, h, w):
            degree += 1

            gp, gq = src[y, xp], src[ny, nx]
            if mixed:
                sp, sq = dst[y, xp], dst[ny, nx]
                b_val += (sp - sq) if abs(sp - sq) > abs(gp - gq) else (gp - gq)
            else:
                b_val += gp - gq

            if mask[ny, nx]:
                A.insert(k, index[ny, nx], -1.0)
            else:
                # vizinho fora da máscara → fronteira
                b_val += dst[ny, nx]

        A.insert(k, k, float(degree))
        b[k] = b_val
        x[k] = dst[y, xp]

    logger.debug(f"Sistema montado: {count} incógnitas, {int(A.counts.sum())} coeficientes")
    return A, b, x


def scatter_result(x, mask, index, dst):
    mask = _as_mask(mask)
    _check_channel("dst", dst, mask.shape)
    if index.shape != mask.shape:
        raise ValueError(f"Índice tem shape {index.shape}, esperado {mask.shape}")

    k = index[mask]
    if k.size and (k.min() < 0 or k.max() >= len(x)):
        raise ValueError("Índice fora do vetor solução")

    vals = np.asarray(x, dtype=np.float64)[k]
    dst[mask] = np.clip(np.rint(vals), 0, 255).astype(np.uint8)
    return dst
