# !/usr/bin/env python

from setuptools import setup, find_packages

install_requires = [
    'sanic',
    'Sanic-Cors',
]

tests_require = [
    'pytest',
    'sanic-testing',
]

setup(name='blogs-sanic',
      version='0.1.0',
      description='In-memory CRUD API for blogs on Sanic, with declarative param validation and model serialization.',
      long_description='In-memory CRUD API for blogs on Sanic. Routes declare serializers for path, query, header, '
                       'body and response; requests are validated before the handler runs.',
      packages=find_packages(exclude=['tests', 'tests.*']),
      install_requires=install_requires,
      extras_require={
          'test': tests_require,
      },
      entry_points={
          'console_scripts': [
              'blogs-sanic = blogs_sanic.__main__:main',
          ],
      },
      python_requires='>=3.8',
      classifiers=[
          'Development Status :: 3 - Alpha',
          'Operating System :: MacOS',
          'Operating System :: POSIX :: Linux',
          'License :: OSI Approved :: MIT License',
          'Programming Language :: Python :: 3',
      ],
      include_package_data=True,
      )
