""" Settings of the demo scripts, read from the environment.

Instructions:
- Create a .env file from the .env.template file and adjust the values.
- Variables with the prefix TQQC_ configure the optimisation, see TqqcConfig.from_env.
- Make sure to never add the .env file to version control. It is also in the .gitignore.
"""

from dotenv import load_dotenv
import os

from tqqc_sim.tqqc import TqqcConfig

load_dotenv()


TQQC_CONFIG = TqqcConfig.from_env()
OUTPUT_DIR = os.environ.get('TQQC_OUTPUT_DIR', 'docs/tutorials/output/')
PARALLEL = os.environ.get('TQQC_PARALLEL', 'false').lower() in ('1', 'true', 'yes')
