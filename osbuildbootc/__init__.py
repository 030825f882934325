"""
osbuildbootc: build bootable disk images from bootc container images.
"""

__version__ = "0.1.0"
