import os
import yaml
from dotenv import load_dotenv
from marshmallow import fields, validate, ValidationError

from jiraanalyst.constants import SUPPORTED_LANGUAGES, DEFAULT_LANGUAGE, JIRA_TIMEOUT, JIRA_MAX_RESULTS, LLM_TIMEOUT
from jiraanalyst.errors import ConfigError
from jiraanalyst.utils.fields import BaseOptionsSchema
from jiraanalyst.utils.logging import contextual_log, redact_sensitive

"""
config.py

Configuration loading for Jira AI Analyst. Supports a YAML file, environment variables (and a
.env file) and, for the CLI only, interactive correction of missing values. Priority:
environment variable > YAML > default. Every section is validated with a marshmallow schema
and handed to the components that need it; nothing downstream reads the environment.
"""


class ConfigLoader:
    """
    Loads and validates configuration sections.
    Args:
        config_path (str, optional): Path to the YAML config file. Defaults to 'config.yaml'.
        environ (dict, optional): Environment mapping; defaults to os.environ after loading .env.
    """
    def __init__(self, config_path=None, environ=None):
        self.config = {}
        if environ is None:
            load_dotenv()
            environ = os.environ
        self.environ = environ
        config_path = config_path or "config.yaml"
        if os.path.exists(config_path):
            with open(config_path, 'r', encoding='utf-8') as file:
                self.config = yaml.safe_load(file) or {}
        if not isinstance(self.config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping at the top level.")

    def _section_value(self, env_key, section, key, default=None):
        if self.environ.get(env_key) not in (None, ''):
            return self.environ[env_key]
        value = (self.config.get(section) or {}).get(key)
        return default if value is None else value

    def _load(self, schema, data, label, interactive=False):
        while True:
            try:
                return schema.load(data)
            except ValidationError as err:
                contextual_log('warning', f"[config] {label} config validation error: {err.messages}", operation="config_load", status="error", params=redact_sensitive(data))
                if not interactive:
                    raise ConfigError(f"{label} configuration is invalid: {err.messages}", messages=err.messages) from err
                from jiraanalyst.utils.rich_prompt import rich_error, rich_prompt_text
                rich_error(f"{label} config validation error: {err.messages}")
                for field in err.messages:
                    prompt = f"{label} {field.replace('_', ' ').title()}"
                    data[field] = rich_prompt_text(prompt, password=any(s in field for s in ("token", "key")))

    def get_jira_config(self, interactive=False):
        """
        Get and validate the Jira configuration (URL, email, API token, API version, timeout).
        Returns:
            dict: Validated Jira config.
        """
        data = {
            'url': self._section_value('JIRA_URL', 'jira', 'url'),
            'email': self._section_value('JIRA_EMAIL', 'jira', 'email'),
            'api_token': self._section_value('JIRA_API_TOKEN', 'jira', 'api_token'),
            'api_version': self._section_value('JIRA_API_VERSION', 'jira', 'api_version', 2),
            'timeout': self._section_value('JIRA_TIMEOUT', 'jira', 'timeout', JIRA_TIMEOUT),
            'max_results': self._section_value('JIRA_MAX_RESULTS', 'jira', 'max_results', JIRA_MAX_RESULTS),
        }
        return self._load(JiraConfigSchema(), data, "Jira", interactive)

    def get_openai_config(self, interactive=False):
        """
        Get and validate the OpenAI configuration used by the text-generation client.
        Returns:
            dict: Validated OpenAI config.
        """
        data = {
            'api_key': self._section_value('OPENAI_API_KEY', 'openai', 'api_key'),
            'model': self._section_value('OPENAI_MODEL', 'openai', 'model', 'gpt-4o-mini'),
            'timeout': self._section_value('OPENAI_TIMEOUT', 'openai', 'timeout', LLM_TIMEOUT),
            'temperature': self._section_value('OPENAI_TEMPERATURE', 'openai', 'temperature', 0.2),
            'max_tokens': self._section_value('OPENAI_MAX_TOKENS', 'openai', 'max_tokens', 2048),
        }
        return self._load(OpenAIConfigSchema(), data, "OpenAI", interactive)

    def get_report_options(self):
        """
        Report options: output language, output directory and format.
        Returns:
            dict: Validated report options.
        """
        data = {
            'language': self._section_value('JIRAANALYST_LANGUAGE', 'report', 'language', DEFAULT_LANGUAGE),
            'output_dir': self._section_value('JIRAANALYST_OUTPUT_DIR', 'report', 'output_dir', 'output'),
            'output_format': self._section_value('JIRAANALYST_OUTPUT_FORMAT', 'report', 'output_format', 'md'),
        }
        return self._load(ReportOptionsSchema(), data, "Report")


class JiraConfigSchema(BaseOptionsSchema):
    """
    Marshmallow schema for the Jira config section.
    """
    url = fields.Url(required=True, require_tld=False, error_messages={"required": "Jira URL is required.", "invalid": "Invalid Jira URL.", "null": "Jira URL is required."})
    email = fields.Email(required=True, error_messages={"required": "Jira email is required.", "invalid": "Invalid email address.", "null": "Jira email is required."})
    api_token = fields.Str(required=True, error_messages={"required": "Jira API token is required.", "null": "Jira API token is required."})
    api_version = fields.Int(load_default=2, validate=validate.OneOf([2, 3]))
    timeout = fields.Float(load_default=JIRA_TIMEOUT, validate=validate.Range(min=1, max=120))
    max_results = fields.Int(load_default=JIRA_MAX_RESULTS, validate=validate.Range(min=1, max=1000))


class OpenAIConfigSchema(BaseOptionsSchema):
    """
    Marshmallow schema for the OpenAI config section.
    """
    api_key = fields.Str(required=True, error_messages={"required": "OpenAI API key is required.", "null": "OpenAI API key is required."})
    model = fields.Str(required=True, error_messages={"required": "OpenAI model is required.", "null": "OpenAI model is required."})
    timeout = fields.Float(load_default=LLM_TIMEOUT, validate=validate.Range(min=1, max=300))
    temperature = fields.Float(load_default=0.2, validate=validate.Range(min=0, max=2))
    max_tokens = fields.Int(load_default=2048, validate=validate.Range(min=64))


class ReportOptionsSchema(BaseOptionsSchema):
    language = fields.Str(load_default=DEFAULT_LANGUAGE, validate=validate.OneOf(SUPPORTED_LANGUAGES))
    output_dir = fields.Str(load_default='output')
    output_format = fields.Str(load_default='md', validate=validate.OneOf(['md', 'json', 'txt']))
