"""
.zshrc generator — oh-my-zsh with powerlevel10k and the cloned plugins.

The plugin list names both bundled oh-my-zsh plugins and the ones
cloned into ``$ZSH_CUSTOM`` by the shell environment step, so the file
must be written after those clones.
"""

from __future__ import annotations

from devstrap.core.models.template import GeneratedFile

ZSH_THEME = "powerlevel10k/powerlevel10k"

ZSH_PLUGINS = (
    "git",
    "docker",
    "docker-compose",
    "sudo",
    "history",
    "copypath",
    "copybuffer",
    "dirhistory",
    "zsh-autosuggestions",
    "fast-syntax-highlighting",
    "fzf",
    "web-search",
    "extract",
    "copyfile",
)

_HEADER = """\
# Path to oh-my-zsh installation
export ZSH="$HOME/.oh-my-zsh"

# Theme
ZSH_THEME="{theme}"

# Plugins
plugins=(
{plugins}
)

source $ZSH/oh-my-zsh.sh
"""

_BODY = """\

# User configuration
export EDITOR='vim'
export LANG=en_US.UTF-8

# Add local bin to PATH
export PATH="$HOME/.local/bin:$PATH"

# Aliases
alias ll='ls -alF'
alias la='ls -A'
alias l='ls -CF'
alias ..='cd ..'
alias ...='cd ../..'
alias grep='grep --color=auto'
alias fgrep='fgrep --color=auto'
alias egrep='egrep --color=auto'

# Modern alternatives (with fallbacks)
if command -v exa >/dev/null 2>&1; then
    alias ls='exa'
    alias ll='exa -la'
    alias tree='exa --tree'
fi

if command -v bat >/dev/null 2>&1; then
    alias cat='bat'
fi

if command -v fd >/dev/null 2>&1; then
    alias find='fd'
elif command -v fd-find >/dev/null 2>&1; then
    alias find='fd-find'
fi

# Git aliases
alias gs='git status'
alias ga='git add'
alias gc='git commit'
alias gp='git push'
alias gl='git log --oneline'
alias gd='git diff'

# Docker aliases
alias dps='docker ps'
alias dpa='docker ps -a'
alias di='docker images'
alias dcu='docker-compose up'
alias dcd='docker-compose down'
alias dcl='docker-compose logs'

# Development aliases
alias py='python3'
alias pip='pip3'

# FZF configuration
export FZF_DEFAULT_OPTS='--height 40% --layout=reverse --border'
if command -v rg >/dev/null 2>&1; then
    export FZF_DEFAULT_COMMAND='rg --files --hidden --follow --glob "!.git/*"'
elif command -v find >/dev/null 2>&1; then
    export FZF_DEFAULT_COMMAND='find . -type f -not -path "*/\\.git/*"'
fi

# History configuration
HISTSIZE=10000
SAVEHIST=10000
setopt SHARE_HISTORY
setopt HIST_IGNORE_DUPS
setopt HIST_IGNORE_ALL_DUPS
setopt HIST_FIND_NO_DUPS
setopt HIST_SAVE_NO_DUPS

# Auto-completion
autoload -Uz compinit
compinit

# Case insensitive completion
zstyle ':completion:*' matcher-list 'm:{a-zA-Z}={A-Za-z}'

# Custom functions
function mkcd() {
    mkdir -p "$1" && cd "$1"
}

function extract() {
    if [ -f $1 ] ; then
        case $1 in
            *.tar.bz2)   tar xjf $1     ;;
            *.tar.gz)    tar xzf $1     ;;
            *.bz2)       bunzip2 $1     ;;
            *.rar)       unrar e $1     ;;
            *.gz)        gunzip $1      ;;
            *.tar)       tar xf $1      ;;
            *.tbz2)      tar xjf $1     ;;
            *.tgz)       tar xzf $1     ;;
            *.zip)       unzip $1       ;;
            *.Z)         uncompress $1  ;;
            *.7z)        7z x $1        ;;
            *)     echo "'$1' cannot be extracted via extract()" ;;
        esac
    else
        echo "'$1' is not a valid file"
    fi
}

# Load local customizations if they exist
[ -f ~/.zshrc.local ] && source ~/.zshrc.local

# To customize prompt, run `p10k configure` or edit ~/.p10k.zsh.
[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh
"""


def generate_zshrc() -> GeneratedFile:
    """Generate ~/.zshrc.  Same bytes on every call."""
    plugins = "\n".join(f"    {name}" for name in ZSH_PLUGINS)
    content = _HEADER.format(theme=ZSH_THEME, plugins=plugins) + _BODY
    return GeneratedFile(
        path=".zshrc",
        content=content,
        reason="oh-my-zsh with powerlevel10k, plugins, aliases and history settings",
    )
