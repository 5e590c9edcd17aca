from storefront.shared.store.actions import Action, AsyncActionTypes, action_creator
from storefront.shared.store.store import Store

__all__ = ["Action", "AsyncActionTypes", "action_creator", "Store"]
