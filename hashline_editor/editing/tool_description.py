"""Caller-facing usage text for the compact ``op`` edit schema."""

HASHLINE_EDIT_DESCRIPTION = """\
Edit files using LINE#ID anchors for precise, staleness-checked changes.

WORKFLOW:
 1. Read the file and copy the exact LINE#ID tags of the lines you touch.
 2. Use the smallest operation per change site.
 3. Send all edits for one file in a single call.
 4. Re-read the file before another call on the same file.
 5. Anchors are "LINE#ID" only; never include the trailing "|content".

PAYLOAD:
 { "filePath": string, "edits": [...], "delete"?: boolean, "rename"?: string }
 Edit: { "op": "replace"|"append"|"prepend", "pos"?: "LINE#ID", "end"?: "LINE#ID",
         "lines": string|string[]|null }
 All anchors are checked against the same pre-edit snapshot and edits are
 applied bottom-up, so line numbers always refer to the file as last read.

LINE#ID FORMAT:
 {line_number}#{hash_id}: 1-based line number and two letters from
 ZPMQVRWSNKTXJBYH, as shown in read output ("12#VK|content").

OPERATIONS:
 replace + pos        -> replace one line (lines: null deletes it)
 replace + pos + end  -> replace the whole range pos..end
 append + pos         -> insert after that line
 prepend + pos        -> insert before that line
 append / prepend     -> without anchor: end / start of file; creates a
                         missing file

CONTENT:
 lines may be a string (split on real newlines; a literal "\\n" stays text)
 or a list of strings (preferred). Plain replacement text only: no LINE#ID
 prefixes, no diff markers.

FILE MODES:
 delete=true deletes the file and requires edits=[] and no rename.
 rename writes the result to a new path and removes the old one.

AUTOCORRECT (built in):
 Echoed anchor/boundary lines are dropped, missing indentation on the
 first replaced line is restored, re-wrapped or merged lines are put back
 into their original shape, BOM and CRLF line endings are preserved.

RECOVERY:
 On a hash mismatch the error lists the current LINE#ID of every changed
 line (marked >>>). Copy those tags and resend the whole batch.
"""
