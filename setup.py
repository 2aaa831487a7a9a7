from setuptools import setup, find_packages
from setuptools.command.install import install
import os
import shutil
from glob import glob

package_name = 'jaco_interaction'

class CustomInstallCommand(install):
    """Custom install command to create ROS2-expected directory structure."""
    def run(self):
        # Run the standard install
        install.run(self)

        # Create the lib/package_name directory structure that ROS2 expects
        lib_dir = os.path.join(self.install_lib, '..', 'lib', package_name)
        bin_dir = os.path.join(self.install_scripts)

        # Create the directory if it doesn't exist
        os.makedirs(lib_dir, exist_ok=True)

        # Copy executables from bin to lib/package_name
        if os.path.exists(bin_dir):
            for filename in os.listdir(bin_dir):
                src_file = os.path.join(bin_dir, filename)
                dst_file = os.path.join(lib_dir, filename)
                if os.path.isfile(src_file):
                    shutil.copy2(src_file, dst_file)
                    # Make sure it's executable
                    os.chmod(dst_file, 0o755)

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        # Launch files
        (os.path.join('share', package_name, 'launch'), glob('launch/*.launch.py')),
        # Config files
        (os.path.join('share', package_name, 'config'), glob('config/*.yaml')),
    ],
    # rclpy, interactive_markers, diagnostic_updater and the message
    # packages come from the ROS 2 installation (see package.xml)
    install_requires=[
        'setuptools',
        'numpy',
        'scipy>=1.7.0',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    zip_safe=True,
    maintainer='jaco_interaction maintainers',
    maintainer_email='robotics@example.com',
    description='Interactive marker teleoperation of the JACO arm',
    license='BSD-3-Clause',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'jaco_interactive_manipulation = jaco_interaction.interactive_manipulation_node:main',
        ],
    },
    cmdclass={
        'install': CustomInstallCommand,
    },
    python_requires='>=3.8',
)
