from setuptools import setup, find_packages

setup(
    name='aiocep',
    version='0.1.0',
    packages=find_packages(),
    platforms='any',
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Framework :: AsyncIO',
    ],
    license='Apache',
    python_requires='>=3.9',
    install_requires=['httpx>=0.23', 'click>=8.0', 'pydantic>=2.0'],
    extras_require={'test': ['pytest', 'pytest-asyncio']},
    entry_points={'console_scripts': ['aiocep = aiocep.cli:main']},
    description='Race postal code lookup services with CSP-style channels',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
