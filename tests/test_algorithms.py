"""Tests for the algorithm drivers."""

from itertools import product

import numpy as np
import pytest

from qubitlab import CancellationToken, DriverConfig, RunCancelledError
from qubitlab.algorithms import (
    ShorAlgorithm, ShorResult, factor, find_order,
    GroverSearch, optimal_iterations,
    QAOAAlgorithm, QAOAResult,
    QuantumMachineLearning, DataPoint, QMLModel,
)
from qubitlab.core import gates
from qubitlab.optimizers import ParameterStrategy, RandomPerturbation


# ==================== Shor ====================

class TestShor:
    @pytest.mark.parametrize("n,expected", [(15, [3, 5]), (21, [3, 7]), (35, [5, 7])])
    def test_factors_semiprimes(self, n, expected):
        result = ShorAlgorithm(seed=1).factor(n)
        assert result.success
        assert sorted(result.factors) == expected
        assert 1 <= result.iterations <= 10

    def test_even_number(self):
        result = factor(22, seed=0)
        assert result == ShorResult(22, [2, 11], 1, True)

    @pytest.mark.parametrize("n", [0, 1, -4])
    def test_below_two_fails(self, n):
        result = factor(n)
        assert not result.success
        assert result.factors == []
        assert result.iterations == 0

    def test_prime_fails_after_max_iterations(self):
        result = ShorAlgorithm(seed=3).factor(13)
        assert not result.success
        assert result.factors == []
        assert result.iterations == 10

    def test_iteration_limit_from_config(self):
        config = DriverConfig(shor_max_iterations=3)
        result = ShorAlgorithm(seed=3, config=config).factor(13)
        assert result.iterations == 3

    def test_find_order(self):
        assert find_order(2, 15) == 4
        assert find_order(7, 15) == 4
        assert find_order(14, 15) == 2
        assert find_order(3, 15) == 1  # not coprime

    def test_engine_left_in_zero_state(self):
        shor = ShorAlgorithm(seed=2)
        shor.factor(21)
        probs = shor.get_quantum_state().probabilities()
        assert probs[0] == pytest.approx(1.0, abs=1e-9)
        assert shor.get_quantum_state().num_qubits == 8

    def test_str(self):
        assert str(ShorResult(15, [3, 5], 2, True)) == "Shor: 15 = 3 x 5 (iterations=2)"
        assert str(ShorResult(13, [], 10, False)) == "Shor: Failed to factor 13"

    def test_cancellation(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(RunCancelledError):
            ShorAlgorithm(seed=0).factor(13, token=token)


# ==================== Grover ====================

class TestGrover:
    @pytest.mark.parametrize("target", range(8))
    def test_finds_every_target_3_qubits(self, target):
        result = GroverSearch(3, seed=0).search(target)
        assert result.target == target
        assert result.iterations == 2
        assert result.probability > 0.9
        assert result.found

    def test_two_qubits_is_exact(self):
        result = GroverSearch(2).search(3)
        assert result.iterations == 1
        assert result.probability == pytest.approx(1.0, abs=1e-9)

    @pytest.mark.parametrize("n,rounds", [(1, 1), (2, 1), (3, 2), (4, 3), (6, 6)])
    def test_optimal_iterations(self, n, rounds):
        assert optimal_iterations(n) == rounds

    def test_steps_increase_probability(self):
        steps = GroverSearch(4, seed=0).search_with_steps(11)
        assert [s.iterations for s in steps] == [0, 1, 2, 3]
        assert steps[0].probability == pytest.approx(1 / 16, abs=1e-9)
        probs = [s.probability for s in steps]
        assert probs == sorted(probs)
        assert steps[-1].probability > 0.9

    def test_matches_analytic_probability(self):
        n = 4
        theta = np.arcsin(1 / np.sqrt(2 ** n))
        steps = GroverSearch(n).search_with_steps(6)
        for step in steps:
            expected = np.sin((2 * step.iterations + 1) * theta) ** 2
            assert step.probability == pytest.approx(expected, abs=1e-9)

    def test_default_size_from_config(self):
        assert GroverSearch().num_qubits == 3
        assert GroverSearch(config=DriverConfig(grover_num_qubits=2)).num_qubits == 2

    @pytest.mark.parametrize("target", [-1, 8])
    def test_target_out_of_range(self, target):
        with pytest.raises(ValueError):
            GroverSearch(3).search(target)

    def test_measure_reads_target(self):
        grover = GroverSearch(2, seed=4)
        grover.search(2)
        assert grover.measure() == 2

    def test_progress_and_cancel(self):
        token = CancellationToken()
        seen = []

        def progress(done, total):
            seen.append((done, total))
            if done == 1:
                token.cancel()

        with pytest.raises(RunCancelledError):
            GroverSearch(4).search(1, token=token, progress=progress)
        assert seen == [(0, 3), (1, 3)]


# ==================== QAOA ====================

def brute_force_min(qaoa):
    return min(qaoa.cost(bits) for bits in product([0, 1], repeat=qaoa.num_qubits))


class TestQAOA:
    def test_result_record(self):
        qaoa = QAOAAlgorithm(3, seed=11)
        result = qaoa.solve(p=2)
        assert isinstance(result, QAOAResult)
        assert len(result.best_solution) == 3
        assert set(result.best_solution) <= {0, 1}
        assert result.iterations == 50
        assert len(result.parameters["gamma"]) == 2
        assert len(result.parameters["beta"]) == 2
        assert result.energy == pytest.approx(qaoa.cost(result.best_solution))
        assert result.energy >= brute_force_min(qaoa) - 1e-12

    def test_parameters_in_range(self):
        result = QAOAAlgorithm(3, seed=4).solve()
        for value in result.parameters["gamma"] + result.parameters["beta"]:
            assert 0 <= value < np.pi

    def test_random_cost_matrix_symmetric(self):
        m = QAOAAlgorithm(4, seed=0).cost_matrix
        np.testing.assert_allclose(m, m.T)
        np.testing.assert_allclose(np.diag(m), 0)
        assert np.all(np.abs(m) <= 1)

    def test_cost_function(self):
        w = [[0, 2, -1], [2, 0, 0.5], [-1, 0.5, 0]]
        qaoa = QAOAAlgorithm(3, cost_matrix=w, seed=0)
        assert qaoa.cost([1, 1, 1]) == pytest.approx(1.5)
        assert qaoa.cost([1, 0, 1]) == pytest.approx(-1.0)
        assert qaoa.cost([0, 0, 0]) == 0

    def test_zero_cost_matrix(self):
        qaoa = QAOAAlgorithm(2, cost_matrix=np.zeros((2, 2)), seed=0)
        result = qaoa.solve()
        assert result.energy == 0.0

    def test_energy_is_best_over_candidates(self):
        class Recorder(ParameterStrategy):
            def __init__(self):
                self.calls = 0

            def propose(self, parameters, loss_history, rng):
                self.calls += 1
                self.history = list(loss_history)
                return rng.uniform(0, np.pi, size=np.shape(parameters))

        strategy = Recorder()
        qaoa = QAOAAlgorithm(3, strategy=strategy, seed=5,
                             config=DriverConfig(qaoa_iterations=12))
        result = qaoa.solve()
        assert strategy.calls == 12
        assert result.iterations == 12
        assert len(strategy.history) == 11
        assert result.energy <= min(strategy.history)

    def test_cost_matrix_setter_validates(self):
        qaoa = QAOAAlgorithm(2, seed=0)
        with pytest.raises(ValueError):
            qaoa.cost_matrix = [[0, 1], [2, 0]]
        with pytest.raises(ValueError):
            qaoa.cost_matrix = np.zeros((3, 3))
        qaoa.cost_matrix = [[0, -1], [-1, 0]]
        assert qaoa.cost_matrix[0, 1] == -1

    def test_cost_matrix_is_a_copy(self):
        qaoa = QAOAAlgorithm(2, cost_matrix=[[0, 1], [1, 0]])
        qaoa.cost_matrix[0, 1] = 5
        assert qaoa.cost_matrix[0, 1] == 1

    def test_invalid_layers(self):
        with pytest.raises(ValueError):
            QAOAAlgorithm(2, seed=0).solve(p=0)

    def test_single_iteration_reports_a_solution(self):
        qaoa = QAOAAlgorithm(3, seed=0, config=DriverConfig(qaoa_iterations=1))
        result = qaoa.solve()
        assert result.iterations == 1
        assert len(result.best_solution) == 3
        assert np.isfinite(result.energy)
        assert result.energy == pytest.approx(qaoa.cost(result.best_solution))

    def test_zz_layer_preserves_computational_basis(self):
        """Without H or mixer the cost layer only adds phases."""
        qaoa = QAOAAlgorithm(3, cost_matrix=[[0, 1, 1], [1, 0, 1], [1, 1, 0]])
        qaoa.simulator.apply(gates.X, [1])
        qaoa._apply_cost_layer(0.8)
        assert qaoa.simulator.get_probabilities()[2] == pytest.approx(1.0)

    def test_seeded_runs_reproducible(self):
        a = QAOAAlgorithm(3, seed=21).solve()
        b = QAOAAlgorithm(3, seed=21).solve()
        assert a == b




# ==================== QML ====================

def blobs(n=12, seed=0):
    rng = np.random.default_rng(seed)
    data = []
    for i in range(n):
        label = i % 2
        center = 0.2 if label == 0 else 0.8
        data.append(DataPoint(np.clip(rng.normal(center, 0.05, 2), 0, 1).tolist(), label))
    return data


class TestQML:
    def test_register_size(self):
        assert QuantumMachineLearning(1).num_qubits == 4
        assert QuantumMachineLearning(4).num_qubits == 4
        assert QuantumMachineLearning(8).num_qubits == 5
        assert QuantumMachineLearning(9).num_qubits == 6

    def test_prediction_is_probability(self):
        qml = QuantumMachineLearning(2, seed=0)
        params = np.random.default_rng(0).uniform(0, 2 * np.pi, qml.num_qubits * 3)
        p = qml.predict([0.3, 0.6], params)
        assert 0.0 <= p <= 1.0

    def test_prediction_without_variational_layer(self):
        """Encoding alone: P(q0 = 1) = sin^2(pi x / 2)."""
        qml = QuantumMachineLearning(2, seed=0)
        assert qml.predict([0.5, 0.0], []) == pytest.approx(0.5, abs=1e-9)
        assert qml.predict([1.0, 0.0], []) == pytest.approx(1.0, abs=1e-9)

    def test_train_classifier(self):
        data = blobs()
        qml = QuantumMachineLearning(2, seed=3)
        model = qml.train_classifier(data, epochs=15)
        assert isinstance(model, QMLModel)
        assert model.epochs == 15
        assert len(model.loss) == 15
        assert len(model.parameters) == qml.num_qubits * 3
        assert 0.0 <= model.accuracy <= 1.0
        assert all(0.0 <= l <= 1.0 for l in model.loss)

    def test_best_accuracy_is_reported_by_classify(self):
        data = blobs()
        qml = QuantumMachineLearning(2, seed=5)
        model = qml.train_classifier(data, epochs=10)
        result = qml.classify(data, model)
        assert result.accuracy == pytest.approx(model.accuracy)
        assert len(result.predictions) == len(data)
        assert set(result.predictions) <= {0, 1}
        assert result.model is model

    def test_default_strategy_uses_learning_rate(self):
        qml = QuantumMachineLearning(2, config=DriverConfig(qml_learning_rate=0.25))
        assert isinstance(qml.strategy, RandomPerturbation)
        assert qml.strategy.step == 0.25

    def test_custom_strategy_sees_loss_history(self):
        lengths = []

        class Frozen(ParameterStrategy):
            def propose(self, parameters, loss_history, rng):
                lengths.append(len(loss_history))
                return parameters

        qml = QuantumMachineLearning(2, strategy=Frozen(), seed=0)
        model = qml.train_classifier(blobs(4), epochs=4)
        assert lengths == [1, 2, 3, 4]
        assert len(set(np.round(model.loss, 12))) == 1

    def test_empty_data_rejected(self):
        qml = QuantumMachineLearning(2)
        with pytest.raises(ValueError):
            qml.train_classifier([], epochs=1)
        with pytest.raises(ValueError):
            qml.classify([], QMLModel([], 0.0, 0))

    def test_quantum_distance(self):
        qml = QuantumMachineLearning(2, seed=0)
        assert qml.quantum_distance([0.3, 0.7], [0.3, 0.7]) == pytest.approx(0.0, abs=1e-9)
        assert qml.quantum_distance([0.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0, abs=1e-9)
        near = qml.quantum_distance([0.2, 0.2], [0.25, 0.2])
        far = qml.quantum_distance([0.2, 0.2], [0.8, 0.2])
        assert near < far

    def test_kmeans_separates_blobs(self):
        data = blobs(10, seed=1)
        result = QuantumMachineLearning(2, seed=0).quantum_kmeans(data, 2)
        assert len(result.clusters) == 10
        assert set(result.clusters) <= {0, 1}
        assert len(result.centroids) == 2
        assert 1 <= result.iterations <= 50
        # Points with the same label end up together
        by_label = {}
        for point, cluster in zip(data, result.clusters):
            by_label.setdefault(point.label, set()).add(cluster)
        if len(set(result.clusters)) == 2:
            assert all(len(c) == 1 for c in by_label.values())

    def test_kmeans_single_cluster(self):
        data = blobs(6)
        result = QuantumMachineLearning(2, seed=0).quantum_kmeans(data, 1)
        assert result.clusters == [0] * 6
        expected = np.mean([p.features for p in data], axis=0)
        np.testing.assert_allclose(result.centroids[0], expected)

    @pytest.mark.parametrize("k", [0, 7])
    def test_kmeans_invalid_k(self, k):
        with pytest.raises(ValueError):
            QuantumMachineLearning(2).quantum_kmeans(blobs(6), k)

    @pytest.mark.parametrize("epochs", [0, -1])
    def test_train_needs_an_epoch(self, epochs):
        with pytest.raises(ValueError):
            QuantumMachineLearning(2).train_classifier(blobs(4), epochs=epochs)

    @pytest.mark.parametrize("max_iterations", [0, -2])
    def test_kmeans_needs_an_iteration(self, max_iterations):
        with pytest.raises(ValueError):
            QuantumMachineLearning(2).quantum_kmeans(blobs(4), 2, max_iterations=max_iterations)

    def test_kmeans_single_iteration_assigns_every_point(self):
        config = DriverConfig(kmeans_max_iterations=1)
        result = QuantumMachineLearning(2, seed=0, config=config).quantum_kmeans(blobs(6), 2)
        assert result.iterations == 1
        assert set(result.clusters) <= {0, 1}

    def test_kmeans_cancellation(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(RunCancelledError):
            QuantumMachineLearning(2).quantum_kmeans(blobs(6), 2, token=token)
