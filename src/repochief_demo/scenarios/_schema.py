"""Validation constants for scenario preset YAML schema."""

REQUIRED_TOP_KEYS = {"name", "description"}
VALID_TOP_KEYS = {"name", "description", "inherits", "session", "agents", "tasks", "amend"}
REQUIRED_AGENT_KEYS = {"role", "name", "template"}
VALID_AGENT_KEYS = {"role", "name", "template", "max_concurrent_tasks"}
REQUIRED_TASK_KEYS = {"id", "type", "objective", "role", "max_tokens"}
VALID_TASK_KEYS = {
    "id", "type", "objective", "role", "max_tokens", "description",
    "dependencies", "context", "success_criteria", "specific_checks",
    "quality_gates",
}
# amend appends text to an inherited task, it never adds or removes nodes
VALID_AMEND_KEYS = {"description", "success_criteria", "specific_checks"}
REQUIRED_TEMPLATE_KEYS = {"role", "model"}
VALID_TEMPLATE_KEYS = {"role", "model", "capabilities", "constraints"}
# Keys whose value must be a list of strings
LIST_TASK_KEYS = {"dependencies", "context", "success_criteria", "specific_checks", "quality_gates"}
LIST_AMEND_KEYS = {"success_criteria", "specific_checks"}
