"""
Run the TQQC optimisation on the noisy simulator for demonstration purposes.

Usage:
- Do pip install -e . on top level of the repository.
- Optionally create a .env file from .env.template to change the qubits, noise, shots or seed.
- Run the script with path on top level of the repository.
"""

# Standard libraries
import logging

# Own library
from tqqc_sim.tqqc import TqqcEngine
from tqqc_sim.simulators import SimulatorBackend
from tqqc_sim.pipelines import Pipeline, PipelineConfig
from configuration.settings import TQQC_CONFIG

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")


""" Optimise with the engine directly """

config = TQQC_CONFIG
backend = SimulatorBackend.from_depol(config.qubits, config.noise).with_seed(config.seed)
print(f"Run {config} on {backend}.")

result = TqqcEngine(config, backend).optimize()
print(result)
print(f"Improvement: {result.improvement_percent():.2f}%, ties: {result.ties_count}, "
      f"inner iterations: {result.total_inner_iterations}.")

for record in result.history:
    print(f"  {record.iteration:2d}: delta={record.delta:+.4f} parity={record.parity_selected:.4f} "
          f"inner={record.inner_count}")


""" Optimise with the pipeline """

pipeline = Pipeline(PipelineConfig.quick(config.qubits).with_seed(config.seed).with_verbose(True))
opt_result = pipeline.run()

print(f"Schedule: {opt_result.schedule.total_duration_ns:.0f} ns, critical depth {opt_result.schedule.critical_depth}, "
      f"parallelism {opt_result.schedule.parallelism:.2f}.")
print(f"Executions: {opt_result.metrics.circuit_executions} circuits, {opt_result.metrics.total_shots} shots, "
      f"early stopped: {opt_result.metrics.early_stopped}.")
print(f"Parity {opt_result.baseline_parity():.4f} -> {opt_result.final_parity():.4f}.")
