def view_url(base_url: str, session_id: str) -> str:
    return f"{base_url.rstrip('/')}/view/{session_id}"


def control_url(base_url: str, session_id: str) -> str:
    return f"{base_url.rstrip('/')}/control/{session_id}"


def obs_instructions(base_url: str, session_id: str, width: int = 800, height: int = 200) -> str:
    """Step-by-step text for adding the display as a browser source."""
    url = view_url(base_url, session_id)
    return '\n'.join([
        'OBS Setup Instructions:',
        '1. In OBS, click on the + icon in the Sources panel',
        '2. Select "Browser" from the list',
        '3. Name your source (e.g., "Timer") and click OK',
        f'4. In the URL field, paste this URL: {url}',
        f'5. Set the width to {width} and height to {height} (adjust as needed)',
        '6. Check "Shutdown source when not visible" for better performance',
        '7. Click OK to add the timer to your scene',
    ])
