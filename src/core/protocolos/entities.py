"""
Entidades do Domínio de Protocolos.

Este módulo define o agregado Protocolo e o registro imutável do seu
histórico.

Entidades:
- ProtocoloEntity: Agregado principal (status, prazo de SLA, posse)
- ProtocoloEventoEntity: Item do histórico (append-only)
- ProtocoloStatus: Estados do ciclo de vida
- ProtocoloPriority: Níveis de prioridade

Regras de Negócio Encapsuladas:
- Validação de dados na abertura
- Transições de status controladas por tabela
- Checagem de papel e posse em cada transição
- Cada transição produz exatamente um item de histórico
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Set
import random
import string
import uuid

from src.core.auditoria.entities import TipoChamada
from src.core.operadores.entities import OperadorEntity
from src.core.shared.exceptions import (
    AuthorizationError,
    StateError,
    ValidationError,
)


class ProtocoloStatus(Enum):
    """
    Estados possíveis de um protocolo.

    Fluxo de Estados:
        ABERTO → EM_ANDAMENTO → RESOLVIDO_PENDENTE → FECHADO
                   ↑  ↓               │                 │
           AGUARDANDO_SETOR           │ (rejeitar)      │ (reabrir)
           AGUARDANDO_CLIENTE         ↓                 ↓
                   EM_ANDAMENTO ←─────┘              REABERTO → EM_ANDAMENTO
    """

    ABERTO = "Aberto"
    EM_ANDAMENTO = "Em andamento"
    AGUARDANDO_SETOR = "Aguardando Setor"
    AGUARDANDO_CLIENTE = "Aguardando Cliente"
    RESOLVIDO_PENDENTE = "Resolvido (Pendente Confirmação)"
    FECHADO = "Fechado"
    REABERTO = "Reaberto"

    @classmethod
    def from_string(cls, value: str) -> "ProtocoloStatus":
        """
        Converte string para enum.

        Args:
            value: Valor string (nome ou valor do enum)

        Raises:
            ValueError: Se valor inválido
        """
        # Tenta pelo nome (EM_ANDAMENTO)
        try:
            return cls[value.strip().upper().replace(" ", "_")]
        except KeyError:
            pass

        # Tenta pelo valor ("Em andamento")
        for status in cls:
            if status.value.lower() == value.strip().lower():
                return status

        raise ValueError(f"Status inválido: {value}")


class ProtocoloPriority(Enum):
    """
    Níveis de prioridade.

    As horas de SLA de cada prioridade são configuradas fora da
    entidade (ver SLAClock).
    """

    BAIXA = "Baixa"
    MEDIA = "Média"
    ALTA = "Alta"

    @classmethod
    def from_string(cls, value: str) -> "ProtocoloPriority":
        """
        Converte string para enum.

        Raises:
            ValueError: Se valor inválido
        """
        try:
            return cls[value.strip().upper()]
        except KeyError:
            pass

        for priority in cls:
            if priority.value.lower() == value.strip().lower():
                return priority

        raise ValueError(f"Prioridade inválida: {value}")


class ProtocoloEventoTipo(Enum):
    """Tipos de item do histórico."""

    CRIADO = "created"
    STATUS_ALTERADO = "status_changed"
    NOTA_ADICIONADA = "note_added"


@dataclass(frozen=True)
class ProtocoloEventoEntity:
    """
    Item imutável do histórico de um protocolo.

    A ordem de criação é a ordem causal do histórico. Empates de
    criado_em são desfeitos por sequencia, atribuída pelo repositório
    no momento do append.

    Attributes:
        protocolo_id: Referência ao protocolo (nunca dona dele)
        tipo: created, status_changed ou note_added
        ator_id: Operador que executou a transição
        criado_em: Momento do registro
        valor_antigo: Valor anterior (status ou responsável)
        valor_novo: Valor posterior
        nota: Texto livre
    """

    protocolo_id: str
    tipo: ProtocoloEventoTipo
    ator_id: str
    criado_em: datetime
    valor_antigo: Optional[str] = None
    valor_novo: Optional[str] = None
    nota: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    sequencia: int = 0


# Transições de status comuns (aguardar/retomar e o ciclo principal).
# Aprovar, rejeitar e reabrir exigem papel administrativo e são
# verificadas nos próprios métodos.
TRANSICOES_VALIDAS = {
    ProtocoloStatus.ABERTO: {ProtocoloStatus.EM_ANDAMENTO},
    ProtocoloStatus.REABERTO: {ProtocoloStatus.EM_ANDAMENTO},
    ProtocoloStatus.EM_ANDAMENTO: {
        ProtocoloStatus.AGUARDANDO_SETOR,
        ProtocoloStatus.AGUARDANDO_CLIENTE,
        ProtocoloStatus.RESOLVIDO_PENDENTE,
    },
    ProtocoloStatus.AGUARDANDO_SETOR: {ProtocoloStatus.EM_ANDAMENTO},
    ProtocoloStatus.AGUARDANDO_CLIENTE: {ProtocoloStatus.EM_ANDAMENTO},
    ProtocoloStatus.RESOLVIDO_PENDENTE: {
        ProtocoloStatus.FECHADO,
        ProtocoloStatus.EM_ANDAMENTO,
    },
    ProtocoloStatus.FECHADO: {ProtocoloStatus.REABERTO},
}

STATUS_AGUARDANDO = {
    ProtocoloStatus.AGUARDANDO_SETOR,
    ProtocoloStatus.AGUARDANDO_CLIENTE,
}


@dataclass
class ProtocoloEntity:
    """
    Entidade de Domínio: Protocolo.

    Agregado principal do motor de protocolos. Cada método de transição
    valida o status atual, o papel/posse do ator e devolve o item de
    histórico correspondente, que o use case grava na mesma transação.

    Invariantes:
    - Exatamente um entre cliente_id e prospect_id
    - Responsável sempre definido (padrão: quem abriu)
    - sla_prazo fixado na abertura e nunca recalculado
    - resumo_resolucao só preenchido em RESOLVIDO_PENDENTE ou FECHADO
    - fechado_em preenchido se e somente se status = FECHADO

    Attributes:
        id: Identificador único (UUID)
        numero: Número exibido ao cliente ("PR" + 5 caracteres)
        cliente_id: Cliente vinculado (ou None)
        prospect_id: Prospect vinculado (ou None)
        aberto_por_id: Operador que abriu
        responsavel_id: Operador responsável atual
        departamento_id: Setor/categoria
        titulo: Título do protocolo
        descricao: Descrição livre
        prioridade: Nível de prioridade
        status: Estado atual
        aberto_em: Momento da abertura
        atualizado_em: Última modificação
        sla_prazo: Prazo de SLA
        resumo_resolucao: Texto canônico da resolução
        fechado_em: Momento da aprovação
        origem_tipo_chamada: Tipo da chamada que originou o protocolo
        versao: Contador para atualização condicional

    Example:
        protocolo = ProtocoloEntity.criar(
            cliente_id="c1",
            prospect_id=None,
            aberto_por_id="op1",
            departamento_id="d3",
            titulo="Vazamento na bomba",
            descricao="Cliente relata vazamento após instalação",
            prioridade=ProtocoloPriority.ALTA,
            aberto_em=agora,
            sla_prazo=agora + timedelta(hours=24),
        )
        evento = protocolo.iniciar(operador, agora)
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    numero: str = ""

    # Sujeito
    cliente_id: Optional[str] = None
    prospect_id: Optional[str] = None

    # Posse
    aberto_por_id: str = ""
    responsavel_id: str = ""
    departamento_id: str = ""

    # Dados principais
    titulo: str = ""
    descricao: str = ""
    prioridade: ProtocoloPriority = ProtocoloPriority.MEDIA
    status: ProtocoloStatus = ProtocoloStatus.ABERTO

    # Timestamps
    aberto_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)
    sla_prazo: Optional[datetime] = None
    fechado_em: Optional[datetime] = None

    resumo_resolucao: Optional[str] = None
    origem_tipo_chamada: Optional[TipoChamada] = None
    versao: int = 1

    PREFIXO_NUMERO = "PR"
    TAMANHO_SUFIXO_NUMERO = 5

    @classmethod
    def gerar_numero(cls) -> str:
        """Gera um número humano no formato PR + 5 alfanuméricos."""
        sufixo = "".join(
            random.choices(string.ascii_uppercase + string.digits, k=cls.TAMANHO_SUFIXO_NUMERO)
        )
        return f"{cls.PREFIXO_NUMERO}{sufixo}"

    @classmethod
    def criar(
        cls,
        aberto_por_id: str,
        departamento_id: str,
        titulo: str,
        descricao: str,
        prioridade: ProtocoloPriority,
        aberto_em: datetime,
        sla_prazo: datetime,
        cliente_id: Optional[str] = None,
        prospect_id: Optional[str] = None,
        responsavel_id: Optional[str] = None,
        origem_tipo_chamada: Optional[TipoChamada] = None,
        numero: Optional[str] = None,
    ) -> "ProtocoloEntity":
        """
        Factory method para abrir protocolo com validações.

        Args:
            aberto_por_id: Operador que abre
            departamento_id: Setor responsável
            titulo: Título (obrigatório)
            descricao: Descrição (obrigatória)
            prioridade: Prioridade já convertida para enum
            aberto_em: Momento da abertura (relógio injetado)
            sla_prazo: Prazo calculado pelo SLAClock
            cliente_id: Cliente vinculado
            prospect_id: Prospect vinculado
            responsavel_id: Responsável explícito (padrão: quem abre)
            origem_tipo_chamada: Tipo da chamada de origem
            numero: Número humano (gerado se omitido)

        Returns:
            Novo protocolo em ABERTO

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_sujeito(cliente_id, prospect_id)
        cls._validar_obrigatorio(titulo, "titulo", "Título é obrigatório")
        cls._validar_obrigatorio(descricao, "descricao", "Descrição é obrigatória")
        cls._validar_obrigatorio(departamento_id, "departamento_id", "Setor é obrigatório")
        cls._validar_obrigatorio(aberto_por_id, "aberto_por_id", "Operador de abertura é obrigatório")

        if not isinstance(prioridade, ProtocoloPriority):
            raise ValidationError(f"Prioridade inválida: {prioridade}", field="prioridade")

        return cls(
            numero=numero or cls.gerar_numero(),
            cliente_id=cliente_id or None,
            prospect_id=prospect_id or None,
            aberto_por_id=aberto_por_id,
            responsavel_id=responsavel_id or aberto_por_id,
            departamento_id=departamento_id.strip(),
            titulo=titulo.strip(),
            descricao=descricao.strip(),
            prioridade=prioridade,
            status=ProtocoloStatus.ABERTO,
            aberto_em=aberto_em,
            atualizado_em=aberto_em,
            sla_prazo=sla_prazo,
            origem_tipo_chamada=origem_tipo_chamada,
        )

    @staticmethod
    def _validar_sujeito(cliente_id: Optional[str], prospect_id: Optional[str]) -> None:
        """Exatamente um entre cliente e prospect."""
        if bool(cliente_id) == bool(prospect_id):
            raise ValidationError(
                "Informe exatamente um entre cliente e prospect",
                field="cliente_id",
            )

    @staticmethod
    def _validar_obrigatorio(valor: Optional[str], campo: str, mensagem: str) -> None:
        if not valor or not valor.strip():
            raise ValidationError(mensagem, field=campo)

    def evento_criacao(self) -> ProtocoloEventoEntity:
        """Item de histórico da abertura."""
        return ProtocoloEventoEntity(
            protocolo_id=self.id,
            tipo=ProtocoloEventoTipo.CRIADO,
            ator_id=self.aberto_por_id,
            criado_em=self.aberto_em,
            valor_novo=self.status.value,
            nota=f"Protocolo {self.numero} aberto",
        )

    # ------------------------------------------------------------------
    # Transições
    # ------------------------------------------------------------------

    def iniciar(self, ator: OperadorEntity, agora: datetime) -> ProtocoloEventoEntity:
        """
        ABERTO/REABERTO → EM_ANDAMENTO, somente pelo responsável.

        Raises:
            StateError: Se status não permite
            AuthorizationError: Se ator não é o responsável
        """
        self._exigir_status({ProtocoloStatus.ABERTO, ProtocoloStatus.REABERTO}, "iniciar")
        self._exigir_responsavel(ator)
        return self._mudar_status(ProtocoloStatus.EM_ANDAMENTO, ator, agora)

    def submeter_resolucao(
        self,
        ator: OperadorEntity,
        texto_resolucao: str,
        agora: datetime,
    ) -> ProtocoloEventoEntity:
        """
        EM_ANDAMENTO → RESOLVIDO_PENDENTE, somente pelo responsável.

        O texto canônico já vem composto pelo AuditGate; aqui só se
        garante que não está vazio.

        Raises:
            StateError: Se status não permite
            AuthorizationError: Se ator não é o responsável
            ValidationError: Se texto vazio
        """
        self.exigir_submissao(ator)
        self._validar_obrigatorio(
            texto_resolucao, "resumo", "Resumo da resolução é obrigatório"
        )

        self.resumo_resolucao = texto_resolucao.strip()
        return self._mudar_status(
            ProtocoloStatus.RESOLVIDO_PENDENTE,
            ator,
            agora,
            nota=self.resumo_resolucao,
        )

    def aprovar(self, ator: OperadorEntity, agora: datetime) -> ProtocoloEventoEntity:
        """
        RESOLVIDO_PENDENTE → FECHADO, somente por administrador.

        Raises:
            StateError: Se status não permite
            AuthorizationError: Se ator não é administrador
        """
        self._exigir_status({ProtocoloStatus.RESOLVIDO_PENDENTE}, "aprovar")
        self._exigir_administrador(ator, "aprovar resoluções")

        self.fechado_em = agora
        return self._mudar_status(
            ProtocoloStatus.FECHADO,
            ator,
            agora,
            nota="Resolução aprovada pelo gestor",
        )

    def rejeitar(
        self,
        ator: OperadorEntity,
        motivo: str,
        agora: datetime,
    ) -> ProtocoloEventoEntity:
        """
        RESOLVIDO_PENDENTE → EM_ANDAMENTO, somente por administrador.

        O protocolo volta ao responsável com o resumo descartado.
        O prazo de SLA não é recalculado.

        Raises:
            StateError: Se status não permite
            AuthorizationError: Se ator não é administrador
            ValidationError: Se motivo vazio
        """
        self._exigir_status({ProtocoloStatus.RESOLVIDO_PENDENTE}, "rejeitar")
        self._exigir_administrador(ator, "rejeitar resoluções")
        self._validar_obrigatorio(motivo, "motivo", "Motivo da rejeição é obrigatório")

        self.resumo_resolucao = None
        return self._mudar_status(
            ProtocoloStatus.EM_ANDAMENTO,
            ator,
            agora,
            nota=f"Resolução rejeitada: {motivo.strip()}",
        )

    def aguardar(
        self,
        ator: OperadorEntity,
        destino: ProtocoloStatus,
        agora: datetime,
        nota: str = "",
    ) -> ProtocoloEventoEntity:
        """
        EM_ANDAMENTO → AGUARDANDO_SETOR/AGUARDANDO_CLIENTE.

        Raises:
            ValidationError: Se destino não é um status de espera
            StateError: Se status não permite
            AuthorizationError: Se ator não é o responsável
        """
        if destino not in STATUS_AGUARDANDO:
            raise ValidationError(
                f"Status de espera inválido: {destino.value}",
                field="destino",
            )
        self._exigir_status({ProtocoloStatus.EM_ANDAMENTO}, "colocar em espera")
        self._exigir_responsavel(ator)
        return self._mudar_status(destino, ator, agora, nota=nota.strip())

    def retomar(self, ator: OperadorEntity, agora: datetime) -> ProtocoloEventoEntity:
        """AGUARDANDO_* → EM_ANDAMENTO, somente pelo responsável."""
        self._exigir_status(STATUS_AGUARDANDO, "retomar")
        self._exigir_responsavel(ator)
        return self._mudar_status(ProtocoloStatus.EM_ANDAMENTO, ator, agora)

    def reabrir(
        self,
        ator: OperadorEntity,
        agora: datetime,
        motivo: str = "",
    ) -> ProtocoloEventoEntity:
        """
        FECHADO → REABERTO, somente por administrador.

        Limpa fechado_em e resumo_resolucao; o prazo de SLA original
        é mantido.
        """
        self._exigir_status({ProtocoloStatus.FECHADO}, "reabrir")
        self._exigir_administrador(ator, "reabrir protocolos")

        self.fechado_em = None
        self.resumo_resolucao = None
        nota = f"Protocolo reaberto: {motivo.strip()}" if motivo and motivo.strip() else "Protocolo reaberto"
        return self._mudar_status(ProtocoloStatus.REABERTO, ator, agora, nota=nota)

    def adicionar_nota(
        self,
        ator: OperadorEntity,
        texto: str,
        agora: datetime,
    ) -> ProtocoloEventoEntity:
        """
        Registra nota livre. Permitido em qualquer status exceto FECHADO.

        Só atualizado_em é alterado.

        Raises:
            ValidationError: Se texto vazio
            StateError: Se protocolo fechado
        """
        self._validar_obrigatorio(texto, "texto", "Texto da nota é obrigatório")
        self._exigir_nao_fechado("adicionar nota")

        self._atualizar_timestamp(agora)
        return ProtocoloEventoEntity(
            protocolo_id=self.id,
            tipo=ProtocoloEventoTipo.NOTA_ADICIONADA,
            ator_id=ator.id,
            criado_em=agora,
            nota=texto.strip(),
        )

    def reatribuir(
        self,
        ator: OperadorEntity,
        novo_responsavel: OperadorEntity,
        agora: datetime,
    ) -> ProtocoloEventoEntity:
        """
        Troca o responsável sem alterar o status.

        Raises:
            StateError: Se protocolo fechado
            AuthorizationError: Se ator não é administrador
            ValidationError: Se novo responsável inativo
        """
        self.exigir_reatribuicao(ator)
        if not novo_responsavel.ativo:
            raise ValidationError(
                f"Operador {novo_responsavel.id} não está ativo",
                field="novo_responsavel_id",
            )

        anterior = self.responsavel_id
        self.responsavel_id = novo_responsavel.id
        self._atualizar_timestamp(agora)
        return ProtocoloEventoEntity(
            protocolo_id=self.id,
            tipo=ProtocoloEventoTipo.NOTA_ADICIONADA,
            ator_id=ator.id,
            criado_em=agora,
            valor_antigo=anterior,
            valor_novo=novo_responsavel.id,
            nota=f"Reatribuído de {anterior} para {novo_responsavel.id}",
        )

    # ------------------------------------------------------------------
    # Guardas
    # ------------------------------------------------------------------

    def exigir_submissao(self, ator: OperadorEntity) -> None:
        """Guardas de status e posse da submissão, checadas antes do checklist."""
        self._exigir_status({ProtocoloStatus.EM_ANDAMENTO}, "submeter resolução")
        self._exigir_responsavel(ator)

    def exigir_reatribuicao(self, ator: OperadorEntity) -> None:
        self._exigir_nao_fechado("reatribuir")
        self._exigir_administrador(ator, "reatribuir protocolos")

    def _exigir_status(self, permitidos: Set[ProtocoloStatus], acao: str) -> None:
        if self.status not in permitidos:
            raise StateError(
                f"Não é possível {acao} protocolo com status {self.status.value}",
                current_status=self.status.value,
            )

    def _exigir_nao_fechado(self, acao: str) -> None:
        if self.status == ProtocoloStatus.FECHADO:
            raise StateError(
                f"Não é possível {acao} protocolo fechado",
                current_status=self.status.value,
            )

    def _exigir_responsavel(self, ator: OperadorEntity) -> None:
        if ator.id != self.responsavel_id:
            raise AuthorizationError(
                "Apenas o responsável pode executar esta ação",
                actor_id=ator.id,
            )

    @staticmethod
    def _exigir_administrador(ator: OperadorEntity, acao: str) -> None:
        if not ator.e_administrador:
            raise AuthorizationError(
                f"Apenas administradores podem {acao}",
                actor_id=ator.id,
            )

    def _mudar_status(
        self,
        novo_status: ProtocoloStatus,
        ator: OperadorEntity,
        agora: datetime,
        nota: str = "",
    ) -> ProtocoloEventoEntity:
        """Aplica a transição da tabela e devolve o item de histórico."""
        if novo_status not in TRANSICOES_VALIDAS.get(self.status, set()):
            raise StateError(
                f"Transição de {self.status.value} para {novo_status.value} não é permitida",
                current_status=self.status.value,
            )

        anterior = self.status
        self.status = novo_status
        self._atualizar_timestamp(agora)
        return ProtocoloEventoEntity(
            protocolo_id=self.id,
            tipo=ProtocoloEventoTipo.STATUS_ALTERADO,
            ator_id=ator.id,
            criado_em=agora,
            valor_antigo=anterior.value,
            valor_novo=novo_status.value,
            nota=nota,
        )

    def _atualizar_timestamp(self, agora: datetime) -> None:
        """Atualiza timestamp de modificação."""
        self.atualizado_em = agora

    # ------------------------------------------------------------------
    # Consultas de SLA (nunca alteram estado)
    # ------------------------------------------------------------------

    def esta_atrasado(self, agora: datetime) -> bool:
        """
        Verifica se o prazo de SLA foi ultrapassado.

        Protocolos fechados nunca estão atrasados.
        """
        if not self.sla_prazo or self.status == ProtocoloStatus.FECHADO:
            return False
        return agora > self.sla_prazo

    def tempo_restante_sla(self, agora: datetime) -> Optional[timedelta]:
        """
        Tempo até o prazo de SLA.

        Returns:
            Positivo se dentro do prazo, negativo se atrasado.
            None se sem prazo ou fechado.
        """
        if not self.sla_prazo or self.status == ProtocoloStatus.FECHADO:
            return None
        return self.sla_prazo - agora

    def pode_ser_visto_por(self, ator: OperadorEntity) -> bool:
        """Administradores veem tudo; demais, só o que abriram ou conduzem."""
        if ator.e_administrador:
            return True
        return ator.id in (self.responsavel_id, self.aberto_por_id)

    def __repr__(self) -> str:
        return (
            f"ProtocoloEntity("
            f"numero={self.numero}, "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}, "
            f"versao={self.versao}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, ProtocoloEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
