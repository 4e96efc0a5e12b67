"""Custom run-step execution for Terraform/OpenTofu projects."""

__version__ = "0.1.0"
