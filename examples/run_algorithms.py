"""Example: the four algorithm drivers, one after another."""
from qubitlab.algorithms import (
    ShorAlgorithm, GroverSearch, QAOAAlgorithm, QuantumMachineLearning, DataPoint,
)

print("Shor - Integer Factorization")
print("=" * 40)
shor = ShorAlgorithm(seed=42)
for n in [15, 21, 33, 35, 55, 77, 91]:
    print(f"  {shor.factor(n)}")

print("\nGrover - 3 qubit search")
print("=" * 40)
for step in GroverSearch(3, seed=42).search_with_steps(5):
    print(f"  round {step.iterations}: P(|101⟩) = {step.probability:.3f}")

print("\nQAOA - random 4 variable cost")
print("=" * 40)
result = QAOAAlgorithm(4, seed=42).solve(p=2)
print(f"  solution={result.best_solution} energy={result.energy:.3f}")

print("\nQML - classifier")
print("=" * 40)
data = [
    DataPoint([0.1, 0.2], 0), DataPoint([0.2, 0.1], 0), DataPoint([0.15, 0.25], 0),
    DataPoint([0.8, 0.9], 1), DataPoint([0.9, 0.7], 1), DataPoint([0.85, 0.8], 1),
]
qml = QuantumMachineLearning(2, seed=42)
model = qml.train_classifier(data, epochs=40)
print(f"  training accuracy: {model.accuracy:.2%}")
clusters = qml.quantum_kmeans(data, 2)
print(f"  k-means clusters: {clusters.clusters}")
