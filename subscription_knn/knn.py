"""K-nearest-neighbours classifier with reproducible tie handling.

scikit-learn's ``KNeighborsClassifier`` leaves the order of equidistant
neighbours to its search backend. This estimator fixes both tie rules:

* Neighbour inclusion: candidates are ranked with a stable sort on Euclidean
  distance, so records at the same distance are taken in training order.
* Vote: majority label among the k neighbours. When two or more labels tie,
  the label held by the nearest of the tied neighbours wins.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.utils.validation import check_array, check_is_fitted, check_X_y


class StableKNeighborsClassifier(ClassifierMixin, BaseEstimator):
    """Euclidean k-NN classifier with deterministic tie-breaking.

    Args:
        n_neighbors: Number of neighbours that vote. If the training set is
            smaller, every training record votes.
    """

    def __init__(self, n_neighbors: int = 5):
        self.n_neighbors = n_neighbors

    def fit(self, X, y):
        X, y = check_X_y(X, y, dtype="numeric")
        if self.n_neighbors < 1:
            raise ValueError(f"n_neighbors must be at least 1, got {self.n_neighbors}")

        self.classes_, self._y = np.unique(y, return_inverse=True)
        self._fit_X = X
        self.y_ = y
        self.n_features_in_ = X.shape[1]
        self.n_samples_fit_ = X.shape[0]
        return self

    def kneighbors(self, X, n_neighbors=None) -> Tuple[np.ndarray, np.ndarray]:
        """Find the nearest training records for each query row.

        Returns:
            Tuple of (distances, indices), each of shape (n_queries, k),
            ordered nearest first. Indices are positions in the training data.
        """
        check_is_fitted(self, "_fit_X")
        X = check_array(X, dtype="numeric")
        k = self.n_neighbors if n_neighbors is None else n_neighbors
        if k < 1:
            raise ValueError(f"n_neighbors must be at least 1, got {k}")
        k = min(k, self.n_samples_fit_)

        diff = X[:, np.newaxis, :] - self._fit_X[np.newaxis, :, :]
        distances = np.sqrt((diff ** 2).sum(axis=2))
        order = np.argsort(distances, axis=1, kind="stable")[:, :k]
        return np.take_along_axis(distances, order, axis=1), order

    def _vote(self, neighbor_labels: np.ndarray) -> int:
        counts = np.bincount(neighbor_labels, minlength=len(self.classes_))
        tied = np.flatnonzero(counts == counts.max())
        if len(tied) == 1:
            return int(tied[0])
        # Neighbours are ordered nearest first
        for label in neighbor_labels:
            if label in tied:
                return int(label)
        return int(tied[0])

    def predict(self, X) -> np.ndarray:
        _, indices = self.kneighbors(X)
        votes = [self._vote(self._y[row]) for row in indices]
        return self.classes_[np.asarray(votes, dtype=int)]

    def predict_proba(self, X) -> np.ndarray:
        """Share of neighbour votes per class, columns ordered as ``classes_``."""
        _, indices = self.kneighbors(X)
        proba = np.zeros((len(indices), len(self.classes_)))
        for i, row in enumerate(indices):
            proba[i] = np.bincount(self._y[row], minlength=len(self.classes_))
        return proba / proba.sum(axis=1, keepdims=True)
