from setuptools import setup


setup(name='mosaicgrid',
      version='0.1.0',
      description='Sphere / Cartesian grid cell intersection: classification, boundary curves and patch areas',
      author='Stefan Endres, Lutz Mädler',
      author_email='s.endres@iwt-uni-bremen.de',
      license='MIT',
      packages=['mosaicgrid',
                'mosaicgrid.grid',
                'mosaicgrid.geometry',
                'mosaicgrid.curve',
                'mosaicgrid.visualization'],
      install_requires=[
          'scipy',
          'numpy',
           ],
      extras_require={
          'plot': ['matplotlib'],
          'test': ['pytest'],
      },
      long_description='None',
      long_description_content_type='text/markdown',
      keywords='geometry sphere grid intersection',
      classifiers=[
          # How mature is this project? Common values are
          #   3 - Alpha
          #   4 - Beta
          #   5 - Production/Stable
          'Development Status :: 3 - Alpha',

          'Intended Audience :: Science/Research',
          'Intended Audience :: Developers',
          'Topic :: Scientific/Engineering',
          'Topic :: Scientific/Engineering :: Mathematics',

          'License :: OSI Approved :: MIT License',

          'Programming Language :: Python :: 3.9',
      ],
      python_requires='>=3.9',
      zip_safe=False)
