"""Chat-completion access and the assistant session.

WARNING: OpenAI API access requires a SEPARATE paid API key.
A ChatGPT Plus subscription does NOT provide API access.
Get a key at https://platform.openai.com/api-keys
"""
