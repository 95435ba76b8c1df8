"""
JWT issuing for the two authentication chains.

Tokens carry a ``chain`` claim ('employee' or 'visitor'). Login only
succeeds for principals of the chain's own kind, and a refresh token is only
accepted by the refresh endpoint of the chain that issued it.
"""
import logging
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from . import roles

logger = logging.getLogger('depot.core')
User = get_user_model()

CHAIN_EMPLOYEE = 'employee'
CHAIN_VISITOR = 'visitor'


def belongs_to_chain(user, chain):
    if chain == CHAIN_EMPLOYEE:
        return roles.is_employee(user)
    return roles.is_visitor(user)


def tokens_for(user, chain):
    """Access/refresh pair for a user, as returned by the login endpoints"""
    refresh = ChainTokenObtainPairSerializer.build_token(user, chain)
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


class ChainTokenObtainPairSerializer(TokenObtainPairSerializer):
    chain = CHAIN_EMPLOYEE

    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        if not belongs_to_chain(self.user, self.chain):
            logger.warning(f"Login of {self.user.username} refused on the {self.chain} chain")
            raise AuthenticationFailed('No active account found with the given credentials')
        data['need_change_pass'] = self.user.need_change_pass
        data['role'] = roles.get_employee_role(self.user) if self.chain == CHAIN_EMPLOYEE else roles.ROLE_VISITOR
        logger.info(f"{self.user.username} logged in on the {self.chain} chain")
        return data

    @classmethod
    def build_token(cls, user, chain):
        token = RefreshToken.for_user(user)
        token['username'] = user.username
        token['chain'] = chain
        token['groups'] = roles.get_group_names(user)
        return token

    @classmethod
    def get_token(cls, user):
        return cls.build_token(user, cls.chain)


class EmployeeTokenObtainPairSerializer(ChainTokenObtainPairSerializer):
    chain = CHAIN_EMPLOYEE


class VisitorTokenObtainPairSerializer(ChainTokenObtainPairSerializer):
    chain = CHAIN_VISITOR


class ChainTokenRefreshSerializer(TokenRefreshSerializer):
    """Refresh serializer that handles deleted users and tokens of the other chain"""
    chain = CHAIN_EMPLOYEE

    def validate(self, attrs):
        try:
            token = RefreshToken(attrs['refresh'])
        except TokenError:
            raise InvalidToken('Token is invalid or expired.')
        if token.get('chain') != self.chain:
            raise InvalidToken('Token was not issued for this application.')
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class EmployeeTokenRefreshSerializer(ChainTokenRefreshSerializer):
    chain = CHAIN_EMPLOYEE


class VisitorTokenRefreshSerializer(ChainTokenRefreshSerializer):
    chain = CHAIN_VISITOR
