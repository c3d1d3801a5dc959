"""quickssm - pick an EC2 instance and open an SSM session to it."""

__version__ = "0.1.0"
