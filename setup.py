from setuptools import find_packages, setup

setup(
  name = 'refmirror',
  packages = find_packages(where='src'),
  package_dir = {'': 'src'},
  version = '1.0.0',
  license='GNU',
  description = 'command line tool to mirror every ref of a git repository onto another remote',
  author = 'refmirror developers',
  keywords = ['git', 'mirror', 'refs'],
  python_requires='>=3.10',
  install_requires=[
"dulwich>=0.22.0",
"pydantic>=2.0",
"pydantic-settings>=2.0",
"rich>=13.0",
"typer>=0.12",
      ],
  extras_require={
    'test': [
"pytest>=7.0",
    ],
  },
  entry_points={
    'console_scripts': [
      'refmirror=refmirror.cli:run_cli',
    ],
  },
  classifiers=[
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'Topic :: Software Development :: Version Control :: Git',
    'License :: OSI Approved :: GNU General Public License (GPL)',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3.10',
    'Programming Language :: Python :: 3.11',
    'Programming Language :: Python :: 3.12',
  ],
)
