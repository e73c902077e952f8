import structlog

logger = structlog.get_logger()


def load_system_instructions(filepath):
    """
    Reads the model's system instructions from a text file.
    Arguments:
        filepath (str): Path to the text file.
    Returns:
        content (str): File content. Empty str ("") if file not found.
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read().strip()
    except FileNotFoundError:
        logger.error("System instruction file not found", path=filepath)
        content = ""
    return content
