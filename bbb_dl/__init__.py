"""
bbb-dl: downloads a recorded BigBlueButton session and assembles it into an
editable Shotcut/MLT project.
"""

__version__ = "1.0.0"
