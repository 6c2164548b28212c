import sys
import os

# Add project root to path
sys.path.append(os.getcwd())

try:
    from tests.test_projection import test_clamp_inside_and_idempotent
    print("Running test_clamp_inside_and_idempotent...", end=" ")
    test_clamp_inside_and_idempotent()
    print("PASS")
except Exception as e:
    print(f"FAIL: {e}")
    sys.exit(1)

try:
    from tests.test_de import test_sphere_2d_converges
    print("Running test_sphere_2d_converges...", end=" ")
    test_sphere_2d_converges()
    print("PASS")
except Exception as e:
    print(f"FAIL: {e}")
    sys.exit(1)

try:
    from tests.test_de import test_population_below_minimum_rejected
    print("Running test_population_below_minimum_rejected...", end=" ")
    test_population_below_minimum_rejected()
    print("PASS")
except Exception as e:
    print(f"FAIL: {e}")
    sys.exit(1)

print("\nAll tests passed!")
