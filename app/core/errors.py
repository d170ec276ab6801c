class LatePolicyError(Exception):
    """Base class for errors raised by late policy actions."""


class AuthorizationDenied(LatePolicyError):
    def __init__(self, action: str, detail: str = "Not allowed to manage this late policy"):
        super().__init__(detail)
        self.action = action
        self.detail = detail


class PolicyNotFound(LatePolicyError):
    def __init__(self, policy_id: int):
        super().__init__(f"Late policy {policy_id} not found")
        self.policy_id = policy_id
        self.detail = "Late policy not found"
