from setuptools import setup, find_packages


install_requires = [
    "numpy",
    "ms_peak_picker",
    "pyteomics >= 4.5",
]


extra_requires = {
    "net": [
        "pythonnet >= 3.0"
    ],
    "cli": [
        'click >= 8.0'
    ],
}


extra_requires['all'] = [dep for feature_reqs in extra_requires.values() for dep in feature_reqs]

extra_requires['test'] = [
    'pytest',
    'click >= 8.0',
]


def run_setup():
    with open("ms_rawscan/version.py") as version_file:
        version = None
        for line in version_file.readlines():
            if "version = " in line:
                version = line.split(" = ")[1].replace("\"", "").strip()
                print("Version is: %r" % (version,))
                break
        else:
            print("Cannot determine version")

    try:
        with open("README.rst") as readme_file:
            long_description = readme_file.read()
    except Exception as e:
        print(e)
        long_description = ''

    setup(
        name='ms_rawscan',
        version=version,
        packages=find_packages(),
        description='Parallel and on-demand extraction of centroided scans from Thermo RAW files',
        long_description=long_description,
        entry_points={
            'console_scripts': [
                "ms-rawscan = ms_rawscan.tools.cli:main",
            ],
        },
        classifiers=[
            'Development Status :: 3 - Alpha',
            'Intended Audience :: Science/Research',
            'Topic :: Scientific/Engineering :: Bio-Informatics'],
        install_requires=install_requires,
        extras_require=extra_requires,
        include_package_data=True,
        zip_safe=False)


run_setup()
