"""
Command-line interface for qubitlab.

Usage:
    qubitlab bell
    qubitlab factor 21
    qubitlab search --qubits 3 --target 5 --steps
    qubitlab qaoa --qubits 4 --layers 2
    qubitlab classify --samples 20 --epochs 30
    qubitlab cluster --samples 20 -k 2
"""
import argparse
import sys
import time

import numpy as np


def _bar(p: float, width: int = 40) -> str:
    return '█' * int(round(p * width))


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def cmd_bell(args, config):
    """Prepare a Bell pair and show its distribution."""
    from ..core import StateVector, gates

    sv = StateVector(2, seed=args.seed)
    sv.apply(gates.H, [0])
    sv.apply(gates.CNOT, [0, 1])

    print("Bell State Probabilities:")
    state = sv.get_state()
    for idx, p in enumerate(state.probabilities()):
        print(f"  |{state.bitstring(idx)}⟩: {p:.3f} {_bar(p)}")
    bits = sv.measure_all()
    print(f"Measured: q0={bits[0]} q1={bits[1]}")


def cmd_factor(args, config):
    """Factor an integer."""
    from ..algorithms import ShorAlgorithm

    start = time.time()
    result = ShorAlgorithm(seed=args.seed, config=config).factor(args.n)
    elapsed = time.time() - start

    print(result)
    print(f"  Iterations: {result.iterations}")
    print(f"  Time: {elapsed:.2f}s")
    return 0 if result.success else 1


def cmd_search(args, config):
    """Grover search for one basis state."""
    from ..algorithms import GroverSearch

    grover = GroverSearch(args.qubits, seed=args.seed, config=config)
    if args.steps:
        for step in grover.search_with_steps(args.target):
            label = 'Initial' if step.iterations == 0 else f'Iteration {step.iterations}'
            print(f"  {label:12s} P(target)={step.probability:.4f} {_bar(step.probability)}")
        result = step
    else:
        result = grover.search(args.target)

    print(f"\nTarget: {result.target}  Iterations: {result.iterations}")
    print(f"Probability: {result.probability:.4f}  Found: {result.found}")
    return 0 if result.found else 1


def cmd_qaoa(args, config):
    """Optimize a random quadratic cost."""
    from ..algorithms import QAOAAlgorithm

    qaoa = QAOAAlgorithm(args.qubits, seed=args.seed, config=config)
    print("Cost matrix:")
    print(np.array2string(qaoa.cost_matrix, precision=2, suppress_small=True))

    start = time.time()
    result = qaoa.solve(p=args.layers)
    elapsed = time.time() - start

    print("\nResult:")
    print(f"  Best solution: {result.best_solution}")
    print(f"  Energy: {result.energy:.4f}")
    print(f"  gamma: {np.round(result.parameters['gamma'], 3).tolist()}")
    print(f"  beta:  {np.round(result.parameters['beta'], 3).tolist()}")
    print(f"  Time: {elapsed:.2f}s")


def _toy_dataset(samples: int, rng):
    """Two blobs in the unit square, labelled by which side they sit on."""
    from ..algorithms import DataPoint

    data = []
    for i in range(samples):
        label = i % 2
        center = 0.25 if label == 0 else 0.75
        features = np.clip(rng.normal(center, 0.1, size=2), 0, 1)
        data.append(DataPoint(features.tolist(), label))
    return data


def cmd_classify(args, config):
    """Train and evaluate the variational classifier on toy data."""
    from ..algorithms import QuantumMachineLearning

    rng = np.random.default_rng(args.seed)
    data = _toy_dataset(args.samples, rng)
    split = max(1, int(0.75 * len(data)))
    train, test = data[:split], data[split:] or data[:split]

    qml = QuantumMachineLearning(2, rng=rng, config=config)
    model = qml.train_classifier(train, epochs=args.epochs)
    result = qml.classify(test, model)

    print(f"Training accuracy: {model.accuracy:.2%}")
    print(f"Test accuracy:     {result.accuracy:.2%}")
    print(f"Final loss:        {model.loss[-1]:.4f}")


def cmd_cluster(args, config):
    """Quantum k-means on toy data."""
    from ..algorithms import QuantumMachineLearning

    if args.k > args.samples:
        print(f"Error: -k ({args.k}) cannot exceed --samples ({args.samples})", file=sys.stderr)
        return 2

    rng = np.random.default_rng(args.seed)
    data = _toy_dataset(args.samples, rng)

    qml = QuantumMachineLearning(2, rng=rng, config=config)
    result = qml.quantum_kmeans(data, args.k)

    print(f"Iterations: {result.iterations}")
    for c, centroid in enumerate(result.centroids):
        size = result.clusters.count(c)
        print(f"  Cluster {c}: {size} points, centroid {np.round(centroid, 3).tolist()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='qubitlab',
        description='Small state vector quantum simulator',
    )
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--config', default=None, help='JSON or YAML driver config')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')

    sub = parser.add_subparsers(dest='command')

    p = sub.add_parser('bell', help='Prepare and measure a Bell pair')
    p.set_defaults(func=cmd_bell)

    p = sub.add_parser('factor', help='Factor an integer')
    p.add_argument('n', type=int)
    p.set_defaults(func=cmd_factor)

    p = sub.add_parser('search', help='Grover search')
    p.add_argument('--qubits', type=int, default=None)
    p.add_argument('--target', type=int, default=5)
    p.add_argument('--steps', action='store_true', help='Show every round')
    p.set_defaults(func=cmd_search)

    p = sub.add_parser('qaoa', help='QAOA on a random cost matrix')
    p.add_argument('--qubits', type=int, default=4)
    p.add_argument('--layers', '-p', type=_positive_int, default=1)
    p.set_defaults(func=cmd_qaoa)

    p = sub.add_parser('classify', help='Variational classifier demo')
    p.add_argument('--samples', type=_positive_int, default=20)
    p.add_argument('--epochs', type=_positive_int, default=30)
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser('cluster', help='Quantum k-means demo')
    p.add_argument('--samples', type=_positive_int, default=20)
    p.add_argument('-k', type=_positive_int, default=2)
    p.set_defaults(func=cmd_cluster)

    return parser


def main(argv=None) -> int:
    from ..config import DEFAULT_CONFIG, DriverConfig
    from ..logging_config import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, 'func', None):
        parser.print_help()
        return 2

    setup_logging(args.log_level)
    config = DriverConfig.from_file(args.config) if args.config else DEFAULT_CONFIG
    return args.func(args, config) or 0


if __name__ == '__main__':
    sys.exit(main())
