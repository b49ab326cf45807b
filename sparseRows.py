import numpy as np
from loguru import logger
from scipy import sparse

UNUSED = -1


class SparseRowMatrix:
    # cada linha guarda as entradas usadas no início dos seus slots,
    # ordenadas por coluna; slots livres têm coluna UNUSED

    def __init__(self, rows=0, max_cols=0):
        self.create(rows, max_cols)

    def create(self, rows, max_cols):
        if rows < 0 or max_cols < 0:
            raise ValueError(f"Dimensões inválidas: rows={rows}, max_cols={max_cols}")

        self.rows = int(rows)
        self.max_cols = int(max_cols)
        self.columns = np.full((self.rows, self.max_cols), UNUSED, dtype=np.int64)
        self.values = np.zeros((self.rows, self.max_cols), dtype=np.float64)
        self.counts = np.zeros(self.rows, dtype=np.int64)
        self.dropped = 0

    def release(self):
        self.create(0, 0)

    def _check_row(self, row):
        if not 0 <= row < self.rows:
            raise IndexError(f"Linha {row} fora da matriz com {self.rows} linhas")

    def row(self, i):
        self._check_row(i)
        n = self.counts[i]
        return self.columns[i, :n], self.values[i, :n]

    def insert(self, row, column, value):
        self._check_row(row)
        if not 0 <= column < self.rows:
            raise IndexError(f"Coluna {column} fora da matriz com {self.rows} colunas")

        n = self.counts[row]
        if n == self.max_cols:
            self.dropped += 1
            logger.warning(
                f"Linha {row} cheia ({self.max_cols} entradas), coluna {column} descartada"
            )
            return

        cols = self.columns[row]
        vals = self.values[row]
        pos = int(np.searchsorted(cols[:n], column, side="left"))

        cols[pos + 1:n + 1] = cols[pos:n]
        vals[pos + 1:n + 1] = vals[pos:n]
        cols[pos] = column
        vals[pos] = value
        self.counts[row] = n + 1

    def calc_split(self):
        split = np.full(self.rows, UNUSED, dtype=np.int64)
        for i in range(self.rows):
            hits = np.flatnonzero(self.columns[i, :self.counts[i]] == i)
            if hits.size:
                split[i] = hits[0]
        return split

    def to_csr(self):
        used = self.columns != UNUSED
        row_idx = np.repeat(np.arange(self.rows), self.counts)
        return sparse.csr_matrix(
            (self.values[used], (row_idx, self.columns[used])),
            shape=(self.rows, self.rows),
        )

    def __repr__(self):
        return (
            f"SparseRowMatrix(rows={self.rows}, max_cols={self.max_cols}, "
            f"nnz={int(self.counts.sum())}, dropped={self.dropped})"
        )
