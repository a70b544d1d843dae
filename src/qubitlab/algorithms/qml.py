"""
Variational quantum classifier and quantum k-means.

Features are angle-encoded with Ry(pi * x) on the first qubits. The
classifier stacks Ry-Rz-Ry rotations and a CNOT chain, and reads the
probability that qubit 0 is |1> as its prediction in [0, 1]. Training is
gradient-free: a ParameterStrategy proposes new angles every epoch and
the best-accuracy angles are kept.

Usage:
    from qubitlab.algorithms import QuantumMachineLearning, DataPoint

    data = [DataPoint([0.1, 0.2], 0), DataPoint([0.9, 0.8], 1)]
    qml = QuantumMachineLearning(num_features=2, seed=0)
    model = qml.train_classifier(data, epochs=20)
    print(qml.classify(data, model).accuracy)
"""
import logging
from dataclasses import dataclass, field
from math import ceil, log2
from typing import List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_CONFIG, DriverConfig
from ..core import StateVector, gates
from ..optimizers import ParameterStrategy, RandomPerturbation
from ..runtime import CancellationToken, ProgressCallback, checkpoint

logger = logging.getLogger(__name__)


@dataclass
class DataPoint:
    features: List[float]
    label: int = 0


@dataclass
class QMLModel:
    """Trained classifier angles plus training statistics."""
    parameters: List[float]
    accuracy: float
    epochs: int
    loss: List[float] = field(default_factory=list)


@dataclass
class ClassificationResult:
    predictions: List[int]
    accuracy: float
    model: QMLModel


@dataclass
class ClusteringResult:
    clusters: List[int]
    centroids: List[List[float]]
    iterations: int


class QuantumMachineLearning:
    """
    Classifier and clustering on one private register.

    The register has max(4, ceil(log2(num_features)) + 2) qubits.

    Args:
        num_features: Length of each feature vector.
        strategy: Parameter update rule for training.
            Defaults to RandomPerturbation(config.qml_learning_rate).
        seed: Seed for the random source.
        rng: Explicit random source (overrides ``seed``).
        config: Supplies learning rate and iteration limits.
    """

    def __init__(self, num_features: int,
                 strategy: Optional[ParameterStrategy] = None,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 config: DriverConfig = DEFAULT_CONFIG):
        if num_features < 1:
            raise ValueError(f"Need at least one feature, got {num_features}")
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self.config = config
        self.num_features = num_features
        self.num_qubits = max(4, ceil(log2(num_features)) + 2)
        self.simulator = StateVector(self.num_qubits, rng=self._rng)
        self.strategy = (strategy if strategy is not None
                         else RandomPerturbation(config.qml_learning_rate))

    # -- Circuit pieces -------------------------------------------------------

    def _encode_features(self, features: Sequence[float]) -> None:
        for i in range(min(len(features), self.num_qubits)):
            self.simulator.apply(gates.Ry(features[i] * np.pi), [i])

    def _apply_variational_circuit(self, parameters: Sequence[float]) -> None:
        n = self.num_qubits
        num_layers = len(parameters) // (n * 3)

        for layer in range(num_layers):
            for q in range(n):
                base = layer * n * 3 + q * 3
                self.simulator.apply(gates.Ry(parameters[base]), [q])
                self.simulator.apply(gates.Rz(parameters[base + 1]), [q])
                self.simulator.apply(gates.Ry(parameters[base + 2]), [q])

            for q in range(n - 1):
                self.simulator.apply(gates.CNOT, [q, q + 1])

    def predict(self, features: Sequence[float], parameters: Sequence[float]) -> float:
        """P(qubit 0 = 1) after encoding and the variational circuit."""
        self.simulator.reset()
        self._encode_features(features)
        self._apply_variational_circuit(parameters)
        return (1.0 - self.simulator.expectation_z(0)) / 2

    # -- Classifier -----------------------------------------------------------

    def train_classifier(self, training_data: Sequence[DataPoint],
                         epochs: Optional[int] = None,
                         token: Optional[CancellationToken] = None,
                         progress: Optional[ProgressCallback] = None) -> QMLModel:
        """
        Train by stochastic perturbation, keeping the best-accuracy angles.

        Args:
            training_data: Labelled points (labels 0 or 1).
            epochs: Defaults to ``config.qml_epochs``.
            token: Checked once per epoch.
            progress: Called with (epoch, epochs).
        """
        if not training_data:
            raise ValueError("Training data is empty")
        if epochs is None:
            epochs = self.config.qml_epochs
        if epochs < 1:
            raise ValueError(f"Need at least one epoch, got {epochs}")

        parameters = self._rng.uniform(0.0, 2 * np.pi, size=self.num_qubits * 3)
        best_params = parameters.copy()
        best_accuracy = 0.0
        loss_history: List[float] = []

        for epoch in range(epochs):
            checkpoint(token, progress, epoch, epochs)
            total_loss = 0.0
            correct = 0

            for point in training_data:
                prediction = self.predict(point.features, parameters)
                total_loss += abs(prediction - point.label)
                if round(prediction) == point.label:
                    correct += 1

            accuracy = correct / len(training_data)
            avg_loss = total_loss / len(training_data)
            loss_history.append(avg_loss)

            if accuracy > best_accuracy:
                best_accuracy = accuracy
                best_params = parameters.copy()
                logger.debug("Epoch %d: accuracy %.3f, loss %.4f", epoch, accuracy, avg_loss)

            parameters = self.strategy.propose(parameters, loss_history, self._rng)

        logger.info("Classifier trained: accuracy %.3f after %d epochs", best_accuracy, epochs)
        return QMLModel(
            parameters=best_params.tolist(),
            accuracy=best_accuracy,
            epochs=epochs,
            loss=loss_history,
        )

    def classify(self, test_data: Sequence[DataPoint], model: QMLModel) -> ClassificationResult:
        if not test_data:
            raise ValueError("Test data is empty")
        predictions = [int(round(self.predict(p.features, model.parameters)))
                       for p in test_data]
        correct = sum(pred == p.label for pred, p in zip(predictions, test_data))
        return ClassificationResult(
            predictions=predictions,
            accuracy=correct / len(test_data),
            model=model,
        )

    # -- Clustering -----------------------------------------------------------

    def quantum_distance(self, a: Sequence[float], b: Sequence[float]) -> float:
        """
        1 - |<b|a>|^2 for the angle encodings of a and b.

        a is encoded, then b is un-encoded on the same qubits; the fidelity
        is the probability of landing back on |0...0>.
        """
        self.simulator.reset()
        for i in range(min(len(a), len(b), self.num_qubits)):
            self.simulator.apply(gates.Ry(a[i] * np.pi), [i])
            self.simulator.apply(gates.Ry(-b[i] * np.pi), [i])

        fidelity = float(self.simulator.get_probabilities()[0])
        return 1.0 - fidelity

    def _assign(self, features, centroids) -> int:
        distances = [self.quantum_distance(features, c) for c in centroids]
        return int(np.argmin(distances))

    def _update_centroids(self, data, clusters, k) -> List[List[float]]:
        centroids = []
        for c in range(k):
            members = [p.features for p, label in zip(data, clusters) if label == c]
            if not members:
                pick = data[int(self._rng.integers(len(data)))]
                centroids.append(list(pick.features))
            else:
                centroids.append(np.mean(np.array(members, dtype=float), axis=0).tolist())
        return centroids

    def quantum_kmeans(self, data: Sequence[DataPoint], k: int,
                       max_iterations: Optional[int] = None,
                       token: Optional[CancellationToken] = None,
                       progress: Optional[ProgressCallback] = None) -> ClusteringResult:
        """
        Lloyd iterations with the quantum distance for assignment.

        Stops early once no point changes cluster.
        """
        if not 1 <= k <= len(data):
            raise ValueError(f"k must be in [1, {len(data)}], got {k}")
        if max_iterations is None:
            max_iterations = self.config.kmeans_max_iterations
        if max_iterations < 1:
            raise ValueError(f"Need at least one iteration, got {max_iterations}")

        picks = self._rng.integers(len(data), size=k)
        centroids = [list(data[int(i)].features) for i in picks]
        clusters = [-1] * len(data)
        iterations = 0

        for it in range(max_iterations):
            checkpoint(token, progress, it, max_iterations)
            iterations += 1
            changed = False

            for i, point in enumerate(data):
                assignment = self._assign(point.features, centroids)
                if clusters[i] != assignment:
                    clusters[i] = assignment
                    changed = True

            if not changed:
                break

            centroids = self._update_centroids(data, clusters, k)

        logger.info("k-means finished after %d iterations", iterations)
        return ClusteringResult(clusters=clusters, centroids=centroids, iterations=iterations)
