from setuptools import setup

setup(
    name='tqqc-sim',
    version='0.1.0',
    author='TQQC Simulation Authors',
    package_dir={'': 'src'},
    packages=['tqqc_sim',
              'tqqc_sim._circuit',
              'tqqc_sim._noise',
              'tqqc_sim._pipeline',
              'tqqc_sim._schedule',
              'tqqc_sim._simulation',
              'tqqc_sim._tqqc',
              'tqqc_sim._utility'],
    install_requires=[
        'numpy',
        'scipy',
        'qiskit>=1.0',
        'opt_einsum',
        'python-dotenv',
        'matplotlib',
        'networkx',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license='MIT',
    python_requires='>=3.9'
)
