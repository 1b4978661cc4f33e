from storefront.faults.policies import (
    FaultPolicies,
    FaultPolicy,
    NewestSortPolicy,
    OrderIdCollisionPolicy,
    PriceSurchargePolicy,
    SearchDropoutPolicy,
    build_fault_policies,
)

__all__ = [
    "FaultPolicies",
    "FaultPolicy",
    "NewestSortPolicy",
    "OrderIdCollisionPolicy",
    "PriceSurchargePolicy",
    "SearchDropoutPolicy",
    "build_fault_policies",
]
