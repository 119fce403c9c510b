# envtoggle

A terminal interface for switching between the variables in a `.env` file.

Files that keep several alternative values for one key, with all but one
commented out, are shown as groups. A screen might look like this, with the
cursor on the first key:

```
> [✓] DATABASE_URL
     * postgres://localhost/dev
       postgres://localhost/test
  [ ] DEBUG
     * true
```

Each key can be switched on or off as a whole, and within a key you pick which
value is active. A key that is switched off still marks, dimmed, the value that
was last selected, so switching it back on restores that value.

On save, the selected line of every active key is uncommented (its first `#`
and one space after it are removed) and every other line of that key is
commented out with `# `, keeping its indentation. Lines that are already in
the right state are written unchanged. Blank lines and comments are kept as
they were. Before writing, the previous file is copied to `<file>.bak`; if that
copy fails, a warning is logged and the save goes ahead.

## Installation

```
pip install .
```

The interface uses the standard `curses` module, so it needs a POSIX terminal.
The package has no other dependencies.

## Usage

```
envtoggle                    # manages ./.env
envtoggle path/to/.env.local
```

If the file does not exist or cannot be read, an error is printed to standard
error and the command exits with status 1. After a normal quit it prints
`envtoggle exited.`

### Keys

| Key                | Action                                              |
|--------------------|-----------------------------------------------------|
| `↑` / `k`          | Move up                                             |
| `↓` / `j`          | Move down                                           |
| `Space`            | On a key: switch it on/off. On a value: select it (switching the key on) |
| `Ctrl+S`           | Save                                                |
| `q` / `Ctrl+C`     | Quit                                                |

The header shows the file name and `[MODIFIED]` while there are unsaved
changes. The footer shows key help, or a status message such as
`Saved successfully!`, which clears itself after two seconds or at the next
key press. Error messages stay until replaced.

When quitting with unsaved changes you are asked
`Save changes before quitting? ([Y]es/[N]o/[C]ancel)`: `y` saves and quits,
`n` quits without saving, `c` or `Esc` returns to the list.

### External changes

The file is polled while the program runs (every 0.1 s); a change is reported
once it has been quiet for 0.5 s. If there are no unsaved changes, the file is
reloaded at once and the cursor returns to the top. If there are unsaved
changes, you are asked to `[R]eload` (dropping your changes) or `[K]eep` them
(ignoring the change on disk; `Esc` does the same).

## Parsing rules

- A line of the form `KEY=value` or `# KEY=value` is a variable; spaces and
  tabs around `#` and `=` are allowed. Keys match `[A-Za-z_][A-Za-z0-9_]*`.
- Spaces, single quotes and double quotes around a value are stripped for
  display. Everything after `=` counts as the value, including any trailing
  comment text.
- A key is active when at least one of its lines is uncommented; the first
  uncommented line is taken as the selected value. Saving then comments out
  any other uncommented lines of that key.
- All other non-blank lines are kept as comments.
- Lines ending in `\r\n` are read correctly; the saved file uses `\n` and
  always ends with a newline.

## Using it as a library

```python
from envtoggle.parser import parse_file, parse_lines
from envtoggle.actions import render_content, save_file
from envtoggle.model import Model

data = parse_file(".env")
group = data.variable_groups["DEBUG"]
print(group.is_active, group.active_line_idx)
print(data.debug_dump())

print(render_content(data))   # the text that save_file would write
save_file(".env", data)       # also writes .env.bak

# Drive the state without a terminal; key names are 'up', 'down', ' ',
# 'ctrl+s', 'q', 'esc' and single letters.
model = Model(".env", parse_lines(["# A=1", "A=2"]))
model.handle_key(" ")
```

`envtoggle.watcher.FileWatcher` can be used on its own; it is a context
manager, and `next_event(timeout)` returns a `FileChanged` or `WatcherError`,
or `None` on timeout or after `stop()`.

`envtoggle.view.render(model)` returns the whole screen as plain text.

## What it does not do

The program only switches between lines that are already in the file. It
cannot add, delete or rename keys, nor edit values. Saving overwrites the file
in place rather than through a temporary file.

## Running the tests

```
pip install .[test]
pytest
```