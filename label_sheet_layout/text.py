"""
Split label text buffers into lines.
"""


#============================================
def split_lines(text: str) -> list[str]:
	"""
	Split a text buffer on line terminators.

	A trailing terminator does not produce an empty final line, while blank
	lines inside the buffer are kept.

	Args:
		text: Text buffer, may use \\n, \\r\\n or \\r terminators.

	Returns:
		List of lines; empty for an empty buffer.
	"""
	return text.splitlines()
