from setuptools import setup, find_packages
import os
from glob import glob

package_name = 'tote_vision'

setup(
    name=package_name,
    version='1.0.0',
    packages=find_packages(exclude=['test', 'test.*']),
    data_files=[
        # Config files
        (os.path.join('share', package_name, 'config'),
            glob('config/*.yaml')),
    ],
    python_requires='>=3.8',
    install_requires=[
        'setuptools',
        'numpy',
        'opencv-python',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='Tote Vision Team',
    maintainer_email='tote-vision@example.com',
    description='Tote identification and range estimation from camera particles',
    license='Apache-2.0',
    entry_points={
        'console_scripts': [
            'tote_vision_node = tote_vision.nodes.vision_node:main',
        ],
    },
)
