# modshelf

A button-driven terminal mod manager. Your mods live in a storage
folder, one sub-folder per game and one sub-folder per mod inside it.
modshelf copies a mod's files into the install folder, removes them
again, tells you whether each mod is `ACTIVE`, `INACTIVE` or
`PARTIAL (n/m)`, and keeps named presets of mods that can be applied in
one go.

## Install

```
pip install .
```

## Run

```
modshelf [--parameters PATH] [--old-config PATH] [--version]
```

- `--parameters`: the settings file, by default
  `~/.config/modshelf/parameters.ini`. It is created with defaults if it
  does not exist.
- `--old-config`: a settings file from an older layout. If it exists it
  is moved to the `--parameters` path on start, after a confirmation
  screen. Without this option, `parameters.ini` in the current working
  folder is looked for.
- `--version`: print the version and exit.

The settings file holds the folder where mods are stored
(`stored-mods-base-folder`, default `/mods/`) and a set of configuration
presets, each naming the folder where mods get installed
(`install-mods-base-folder`). The defaults are `default` (`/atmosphere/`),
`reinx` (`/reinx/`), `sxos` (`/sxos/`) and `root` (`/`). Set
`stored-mods-base-folder` and the install folders to real paths on your
machine before use.

### Input

Input is read one line at a time from standard input; each line is one
frame of button presses. A line holds button names separated by spaces
or commas: `a`, `b`, `x`, `y`, `l`, `r`, `zl`, `zr`, `+` (or `plus`),
`-` (or `minus`), `up`, `down`, `left`, `right`. An empty line is a frame
with no buttons. When input ends, the program stops.

`up` / `down` move the cursor, `left` / `right` change page.

### In the game list

- **A**: open the selected game folder
- **Y**: switch to the next configuration preset
- **ZL / ZR**: "switch back to the GUI": sets `use-gui = 1` in the
  settings file and quits
- **B**: quit

### In a game's mod list

- **A / X**: apply / disable the selected mod
- **Y**: mod options (status of each file, conflicts with other mods)
- **ZL / ZR**: folder options (recheck all mods, disable all mods, pin a
  configuration preset to this folder)
- **- / +**: open the mod preset menu / apply the selected mod preset
- **L / R**: previous / next mod preset
- **B**: go back

When applying a mod over files that already exist, you are asked
`Yes`, `Yes to all`, `No` or `No to all`. Applying a preset first
disables every mod of the folder, then applies the preset's mods in
order; where they share a file, the last mod's copy is used.

In the mod preset menu, **A** selects a preset, **X** deletes it, **Y**
edits it, **+** creates a new one and **B** goes back. In the preset
editor, **A** adds the selected mod, **X** removes its last occurrence,
**+** saves (then asks for the preset name on a text line) and **B**
aborts. After saving, the files that several mods of the preset share
are listed with the mod whose copy will be used.

Files kept in each game folder:

- `mods_status_cache.txt`: cached mod status per configuration preset
- `mod_presets.conf`: the mod presets
- `this_folder_config.txt`: a configuration preset pinned to the folder

## Using it from Python

The pieces are usable on their own:

- `modshelf.parameters.ParametersHandler` reads and writes the settings
  file and its configuration presets.
- `modshelf.mod_manager.ModManager` applies (`apply_mod`,
  `apply_mod_list`), removes (`remove_mod`) and checks (`get_mod_status`,
  `mod_files_status`) mods.
- `modshelf.presets.ModPresets` reads and writes mod presets
  (`read_parameter_file`, `recreate_preset_file`) and finds shared files
  (`preset_conflicts`, `get_conflicts_with_other_mods`).
- `modshelf.fsutil` has the file helpers (`list_files_in_subfolders`,
  `files_are_identical`, `parse_size_units`, ...).
- `modshelf.browser.ModBrowser` ties them together behind
  `modshelf.terminal.Terminal`, whose `keys` argument takes any iterable
  of input lines, and `modshelf.app.run` drives the main loop.

## What it does not do

- It has no graphical interface; "switch back to the GUI" only records
  the choice in the settings file and quits.
- It does not read keys as they are pressed: input is line-based, and a
  held button is only the same button named on consecutive lines.
- It does not show game icons or look up game titles; game folders are
  shown by name.

## Tests

```
pip install .[test]
pytest
```