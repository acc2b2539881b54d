from proofviral.models.user import User
from proofviral.models.business import Business
from proofviral.models.review import Review
from proofviral.models.social_card import SocialCard
from proofviral.models.token_blocklist import TokenBlocklist

__all__ = ['User', 'Business', 'Review', 'SocialCard', 'TokenBlocklist']
