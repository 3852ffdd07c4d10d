"""LocalUser: the host application's account record, as seen by social login."""

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from socialauth.domain.auth.model.social_profile import SocialProfile


class LocalUser(BaseModel):
    """An application user.

    Only the primary key is known here; every other column of the host's user
    record rides along as an extra attribute. Hosts may subclass to declare
    their columns as typed fields.
    """

    model_config = ConfigDict(extra="allow")

    id: int | str
    social_profile: SocialProfile | None = None

    _unset: set[str] = PrivateAttr(default_factory=set)

    def unset(self, name: str) -> None:
        """Drop an attribute entirely (e.g. the password hash).

        Extra attributes are removed. Declared fields are blanked and left out
        of every serialized form of the user.
        """
        if name in type(self).model_fields:
            self.__dict__[name] = None
            self._unset.add(name)
        elif self.model_extra is not None:
            self.model_extra.pop(name, None)

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-ready representation for cookie-backed sessions.

        The provider access token of the attached profile is never included.
        """
        exclude: dict[str, Any] = {name: True for name in self._unset}
        exclude["social_profile"] = {"access_token": True}
        return self.model_dump(mode="json", exclude=exclude)
