from .user_provisioning import UserProvisioningService

__all__ = ["UserProvisioningService"]
