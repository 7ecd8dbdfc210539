from setuptools import setup

setup(name = 'pyfesl',
      version = '0.1.0',
      description = '''Fish residency and movement network analysis for
acoustic telemetry detection data.''',
      license = 'MIT',
      packages = ['pyfesl',],
      python_requires= '>=3.9',
      install_requires=["numpy >= 1.17.4",
                        "pandas >= 1.3",
                        "matplotlib >= 3.1.1",
                        "networkx >= 2.2"],
      extras_require = {'test': ["pytest >= 7.0"]},
      zip_safe = False
      )
