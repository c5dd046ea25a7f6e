"""Configuration resolution for the issue branch cleaner."""

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple

from git import Repo

from shared.cli import info
from shared.logger import get_logger

from .prompts import Prompter
from .tracker import AuthenticationError, IssueTracker

logger = get_logger(__name__)

# git config keys shared with git-open-pull
KEY_BASE_ACCOUNT = "gitOpenPull.baseAccount"
KEY_BASE_REPO = "gitOpenPull.baseRepo"
KEY_BASE = "gitOpenPull.base"
KEY_USER = "github.user"
KEY_PASSWORD = "github.password"
KEY_TOKEN = "gitOpenPull.token"

DEFAULT_BASE = "master"


class ConfigStore(Protocol):
    """Namespaced key-value settings."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


def _split_key(key: str) -> Tuple[str, str]:
    if "." not in key:
        raise ValueError(f"Config key must look like section.option: {key}")
    section, option = key.rsplit(".", 1)
    return section, option


class GitConfigStore:
    """
    Settings stored in git config.

    Reads see every config level (system, global, repository); writes go to
    the repository config, like a plain `git config key value`.
    """

    def __init__(self, repo: Repo):
        self.repo = repo

    def get(self, key: str) -> Optional[str]:
        section, option = _split_key(key)
        with self.repo.config_reader() as reader:
            if not reader.has_option(section, option):
                return None
            # Raw string, get_value() would turn numeric tokens into ints
            value = reader.get(section, option)
        return value or None

    def set(self, key: str, value: str) -> None:
        section, option = _split_key(key)
        with self.repo.config_writer() as writer:
            writer.set_value(section, option, value)
        logger.debug(f"Saved {key} to git config")


class InMemoryConfigStore:
    """Settings kept in a dict."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key) or None

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass
class CleanupConfig:
    """
    Settings for one cleanup run.

    Attributes:
        base_account: Account owning the repository and its issues
        base_repo: Repository name
        base: Integration branch
        user: GitHub username
        password: GitHub password, only used to obtain a token
        token: OAuth token used for issue lookups
        issue: Issue number given on the command line (not used for filtering)
        save: Save a newly obtained token to the config store
        feature_branch: Branch the changes live on
    """

    base_account: Optional[str] = None
    base_repo: Optional[str] = None
    base: str = DEFAULT_BASE
    user: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
    issue: Optional[str] = None
    save: bool = False
    feature_branch: Optional[str] = None

    @property
    def feature_ref(self) -> Optional[str]:
        """Feature branch as "<account>:<branch>", assuming the user's account."""
        if not self.feature_branch:
            return None
        ref = self.feature_branch.replace("/", ":")
        if ":" not in ref:
            ref = f"{self.user or ''}:{ref}"
        return ref


def load_config(store: ConfigStore, **overrides: Optional[str]) -> CleanupConfig:
    """
    Merge config store values with command-line overrides.

    Overrides that are None or empty leave the stored value in place.

    Args:
        store: Config store to read
        overrides: CleanupConfig fields given on the command line

    Returns:
        Merged CleanupConfig
    """
    config = CleanupConfig(
        base_account=store.get(KEY_BASE_ACCOUNT),
        base_repo=store.get(KEY_BASE_REPO),
        base=store.get(KEY_BASE) or DEFAULT_BASE,
        user=store.get(KEY_USER),
        password=store.get(KEY_PASSWORD),
        token=store.get(KEY_TOKEN),
    )

    for field_name, value in overrides.items():
        if not hasattr(config, field_name):
            raise TypeError(f"Unknown config option: {field_name}")
        if value in (None, ""):
            continue
        setattr(config, field_name, value)

    return config


def ensure_token(
    config: CleanupConfig, store: ConfigStore, tracker: IssueTracker, prompter: Prompter
) -> str:
    """
    Make sure the config carries an access token.

    Prompts for missing credentials and exchanges them for a token when none
    is configured. With config.save set, a new token is written back.

    Raises:
        AuthenticationError: If the tracker did not return a token
    """
    if config.token:
        info("... using saved access token")
        return config.token

    if not config.user:
        config.user = prompter.prompt_visible("github username: ")
    if not config.password:
        info(f"using github username: {config.user}")
        config.password = prompter.prompt_hidden("github password: ")

    info("... getting access token (run with --save to save access token)")
    result = tracker.create_token(config.user, config.password)
    if not result.ok:
        raise AuthenticationError(result.raw_body)

    config.token = result.token
    if config.save:
        store.set(KEY_TOKEN, config.token)
        logger.info("Saved access token to git config")
    return config.token


def ensure_repository(config: CleanupConfig, store: ConfigStore, prompter: Prompter) -> None:
    """Prompt for the account and repository when unknown and save the answers."""
    if not config.base_account:
        config.base_account = prompter.prompt_visible(
            "destination github username (account to pull code into): "
        )
        store.set(KEY_BASE_ACCOUNT, config.base_account)

    if not config.base_repo:
        config.base_repo = prompter.prompt_visible(
            f"github repository name (ie: github.com/{config.base_account}/___): "
        )
        store.set(KEY_BASE_REPO, config.base_repo)


def resolve_config(
    store: ConfigStore, tracker: IssueTracker, prompter: Prompter, **overrides
) -> CleanupConfig:
    """
    Build the complete run configuration.

    Precedence is command line, then config store, then interactive prompt.

    Raises:
        AuthenticationError: If no token could be obtained
    """
    config = load_config(store, **overrides)
    ensure_token(config, store, tracker, prompter)
    ensure_repository(config, store, prompter)

    logger.debug(
        f"Using {config.base_account}/{config.base_repo} (base {config.base}, "
        f"feature {config.feature_ref}, issue {config.issue})"
    )
    return config
