"""Install the IIIF auth delegate package."""

from setuptools import setup, find_packages

setup(
    name='hauth-delegate',
    version='0.1.0',
    packages=find_packages(include=['hauth_delegate', 'hauth_delegate.*'],
                           exclude=['*tests*']),
    python_requires='>=3.8',
    install_requires=[
        "flask",
        "werkzeug",
        "requests",
        "pydantic>=2",
        "python-json-logger",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False
)
