"""
Main entry point for running an NSGA-II optimization.
"""
import logging
import os
import sys

# Ensure the project root is in the python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

import nsgaii


def main():
    """
    Main execution function.
    """
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    print("--- nsgaii: NSGA-II multi-objective optimization ---")

    # 1. Load configuration from file
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"
    config = nsgaii.load_config(config_path)
    print(f"Configuration loaded. Problem: {config.problem.name}")

    # 2. Create and run the optimizer
    optimizer = nsgaii.Optimizer.from_config(config)
    print("Running optimization loop...")
    hall_of_fame, _ = optimizer.run()
    print(f"Optimization complete. Hall of fame holds {len(hall_of_fame)} individuals.")

    # 3. Generate the final report
    results = optimizer.results()
    report_dir = "runs/latest"
    results.generate_report(output_dir=report_dir)
    nsgaii.save_results(results, os.path.join(report_dir, "results.json"))
    print(f"Report generated in '{report_dir}'.")


if __name__ == "__main__":
    main()
