"""Example: Bell state statistics on qubitlab."""
import numpy as np

from qubitlab import StateVector, gates

SHOTS = 1000

print("=" * 50)
print("qubitlab: Bell State Example")
print("=" * 50)

rng = np.random.default_rng()
counts = {}
for _ in range(SHOTS):
    sv = StateVector(2, rng=rng)
    sv.apply(gates.H, [0])
    sv.apply(gates.CNOT, [0, 1])
    q0, q1 = sv.measure_all()
    key = f"{q1}{q0}"
    counts[key] = counts.get(key, 0) + 1

print("\nMeasurement Results:")
for state, count in sorted(counts.items()):
    print(f"  |{state}⟩: {count:4d} ({100*count/SHOTS:5.1f}%)")

print("\nExpected: ~50% |00⟩ and ~50% |11⟩ (entangled!)")
