"""Social layer - Wallet identity and card publishing on Tapestry."""

from crypt_cards.social.tapestry import SocialIdentity, TapestryClient, TapestryClientError

__all__ = ["SocialIdentity", "TapestryClient", "TapestryClientError"]
