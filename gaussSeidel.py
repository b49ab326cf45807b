from collections import namedtuple

import numpy as np
from loguru import logger

SolveResult = namedtuple("SolveResult", ["iterations", "converged", "residual"])


def _unpack_rows(A, split):
    off_cols = []
    off_vals = []
    diag = []
    for i in range(A.rows):
        cols, vals = A.row(i)
        s = int(split[i])
        if s < 0:
            raise ValueError(f"Linha {i} sem coeficiente diagonal")
        if vals[s] == 0.0:
            raise ValueError(f"Coeficiente diagonal nulo na linha {i}")
        off_cols.append(np.delete(cols, s).tolist())
        off_vals.append(np.delete(vals, s).tolist())
        diag.append(float(vals[s]))
    return off_cols, off_vals, diag


def residual_norm(A, b, x):
    if A.rows == 0:
        return 0.0
    return float(np.max(np.abs(A.to_csr() @ x - np.asarray(b))))


def solve(A, split, b, x, max_iters, eps, progress=None, report_every=100):
    # para quando todas as incógnitas mudam menos que eps na mesma varredura;
    # esgotar max_iters não é erro, x fica com a última iteração
    rows = A.rows
    if not (len(split) == len(b) == len(x) == rows):
        raise ValueError(
            f"Tamanhos incompatíveis: rows={rows}, split={len(split)}, b={len(b)}, x={len(x)}"
        )
    if not isinstance(x, np.ndarray) or x.dtype.kind != "f":
        raise ValueError("x precisa ser um array numpy de ponto flutuante")
    if max_iters < 1:
        raise ValueError(f"max_iters precisa ser >= 1, recebido {max_iters}")
    if eps <= 0:
        raise ValueError(f"eps precisa ser positivo, recebido {eps}")

    off_cols, off_vals, diag = _unpack_rows(A, np.asarray(split))
    bs = np.asarray(b, dtype=np.float64).tolist()
    xs = x.tolist()

    converged = False
    iteration = 0
    for iteration in range(1, max_iters + 1):
        count = 0
        for i in range(rows):
            val = 0.0
            for c, v in zip(off_cols[i], off_vals[i]):
                val += v * xs[c]
            val = (bs[i] - val) / diag[i]
            if abs(val - xs[i]) < eps:
                count += 1
            xs[i] = val

        if count == rows:
            converged = True
            logger.debug(f"Convergiu na iteração {iteration}")
            if progress is not None:
                progress(iteration, True)
            break

        if iteration % report_every == 0:
            logger.debug(f"Iteração {iteration}")
            if progress is not None:
                progress(iteration, False)

    x[:] = xs
    return SolveResult(iteration, converged, residual_norm(A, b, x))
